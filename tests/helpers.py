"""
Builders and fakes shared by the test modules.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from relaypanel.application.ports.outbound import IRelayReloader
from relaypanel.domain.exceptions import SyncOperationException
from relaypanel.domain.models.client_domain_model import Client, SecretMode

PLAIN_SECRET = "0123456789abcdef0123456789abcdef"
OTHER_SECRET = "fedcba9876543210fedcba9876543210"


def make_client(
        secret: str = PLAIN_SECRET,
        secret_mode: SecretMode = SecretMode.PLAIN,
        expires_at: Optional[datetime] = None,
        name: str = "test",
) -> Client:
    now = datetime.now(timezone.utc)
    return Client(
        id=str(uuid.uuid4()),
        name=name,
        secret_mode=secret_mode,
        secret=secret,
        created_at=now,
        updated_at=now,
        expires_at=expires_at,
    )


def past(**kwargs) -> datetime:
    return datetime.now(timezone.utc) - timedelta(**kwargs)


def future(**kwargs) -> datetime:
    return datetime.now(timezone.utc) + timedelta(**kwargs)


class FakeReloader(IRelayReloader):
    """Records reload calls; fails the calls whose 1-based index is in fail_on."""

    def __init__(self, fail_on: Optional[List[int]] = None, delay: float = 0.0):
        self.fail_on = set(fail_on or [])
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.events: List[str] = []

    async def reload(self) -> str:
        self.calls += 1
        call = self.calls
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.events.append(f"start-{call}")
        try:
            await asyncio.sleep(self.delay)
            if call in self.fail_on:
                raise SyncOperationException(detail=f"reload {call} failed")
            return "ok"
        finally:
            self.events.append(f"end-{call}")
            self.active -= 1
