# relaypanel/application/use_cases/background_tasks.py

"""
Background tasks.

Two independent periodic loops: expired-client cleanup (which triggers a
sync when it removed something) and public IP refresh. Neither loop ever
propagates an error; failures are logged and the next tick runs as usual.
"""

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional

from relaypanel.application.ports.inbound import IClientUseCase, ISyncUseCase
from relaypanel.application.ports.outbound import IPublicIpResolver
from relaypanel.domain.exceptions import PublicIpLookupException
from relaypanel.domain.models.client_domain_model import CleanupResult, PublicIpState
from relaypanel.domain.services.expiry_service import utcnow

logger = logging.getLogger(__name__)


class PublicIpMonitor:
    """Keeps the last discovered public IP and the last lookup error."""

    def __init__(self, resolver: Optional[IPublicIpResolver]):
        self.resolver = resolver
        self.state = PublicIpState()

    def snapshot(self) -> PublicIpState:
        return replace(self.state)

    async def refresh(self) -> Optional[str]:
        """
        Run one lookup. Never raises.

        Returns:
            The discovered address, or None if the lookup failed or is disabled
        """
        if self.resolver is None:
            return None

        try:
            ip = await self.resolver.resolve()
        except PublicIpLookupException as e:
            self.state.last_error = str(e)
            logger.warning(f"Public IP lookup failed: {e}")
            return None
        except Exception as e:
            self.state.last_error = str(e)
            logger.exception(f"Unexpected error in public IP lookup: {e}")
            return None

        self.state.value = ip
        self.state.last_updated_at = utcnow()
        self.state.last_error = None
        logger.info(f"Public IP detected: {ip}")
        return ip


class BackgroundScheduler:
    """
    Runs the cleanup and public IP loops as asyncio tasks.
    """

    def __init__(
            self,
            clients: IClientUseCase,
            sync: ISyncUseCase,
            ip_monitor: PublicIpMonitor,
            cleanup_interval: float,
            ip_refresh_interval: float,
    ):
        self.clients = clients
        self.sync = sync
        self.ip_monitor = ip_monitor
        self.cleanup_interval = cleanup_interval
        self.ip_refresh_interval = ip_refresh_interval
        self._tasks: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def run_cleanup_once(self) -> Optional[CleanupResult]:
        """
        Remove expired clients and sync if the registry changed. Never raises.
        """
        try:
            result = await self.clients.cleanup_expired()
            if result.changed:
                logger.info(f"Auto cleanup removed {result.removed} expired clients")
                await self.sync.enqueue("auto cleanup")
            return result
        except Exception as e:
            logger.exception(f"Error in auto cleanup: {e}")
            return None

    async def _cleanup_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.cleanup_interval)
                await self.run_cleanup_once()
            except asyncio.CancelledError:
                logger.info("Cleanup task cancelled")
                break

    async def _public_ip_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.ip_refresh_interval)
                await self.ip_monitor.refresh()
            except asyncio.CancelledError:
                logger.info("Public IP refresh task cancelled")
                break

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._tasks = [loop.create_task(self._cleanup_loop(), name="client-cleanup")]
        if self.ip_monitor.resolver is not None:
            self._tasks.append(loop.create_task(self._public_ip_loop(), name="public-ip-refresh"))
        logger.info(
            f"Background tasks started (cleanup every {self.cleanup_interval}s, "
            f"public IP every {self.ip_refresh_interval}s)"
        )

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
