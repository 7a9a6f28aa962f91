# relaypanel/application/use_cases/sync_use_cases.py

"""
Service for relay synchronization.

Requests are appended to a FIFO queue drained by a single worker task,
so at most one attempt runs at a time and attempts run in request order.
A failed attempt is reported to its own caller only; the worker moves
on to the next request.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Optional

from relaypanel.application.ports.inbound import ISyncUseCase
from relaypanel.application.ports.outbound import (
    IClientRepository,
    IRelayConfigWriter,
    IRelayReloader,
    IStateRepository,
)
from relaypanel.domain.exceptions import SyncOperationException
from relaypanel.domain.models.client_domain_model import SyncStatus
from relaypanel.domain.services.expiry_service import utcnow
from relaypanel.domain.services.selection_service import ActiveSecretSelector

logger = logging.getLogger(__name__)


@dataclass
class SyncRequest:
    reason: str
    future: "asyncio.Future[SyncStatus]"


class SyncPipeline(ISyncUseCase):
    """
    Serialized pipeline that rewrites the relay configuration and reloads the relay.
    """

    def __init__(
            self,
            client_repository: IClientRepository,
            state_repository: IStateRepository,
            config_writer: IRelayConfigWriter,
            reloader: Optional[IRelayReloader],
            max_secrets: int,
    ):
        self.client_repository = client_repository
        self.state_repository = state_repository
        self.config_writer = config_writer
        self.reloader = reloader
        self.max_secrets = max_secrets

        self.status = SyncStatus()
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    def snapshot(self) -> SyncStatus:
        return replace(self.status)

    def _ensure_worker(self) -> None:
        if self._queue is None:
            self._queue = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run(), name="relay-sync-worker")

    async def enqueue(self, reason: str) -> SyncStatus:
        """
        Queue a sync attempt and wait for the outcome of that attempt.

        Args:
            reason: Short description recorded as last_reason

        Returns:
            Status snapshot taken right after this attempt succeeded

        Raises:
            SyncOperationException: If this attempt failed
        """
        self._ensure_worker()
        future = asyncio.get_running_loop().create_future()
        await self._queue.put(SyncRequest(reason=reason, future=future))
        return await future

    async def _run(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                status = await self._attempt(request.reason)
            except asyncio.CancelledError:
                if not request.future.done():
                    request.future.cancel()
                raise
            except SyncOperationException as e:
                if not request.future.done():
                    request.future.set_exception(e)
            else:
                if not request.future.done():
                    request.future.set_result(status)
            finally:
                self._queue.task_done()

    async def _attempt(self, reason: str) -> SyncStatus:
        self.status.in_progress = True
        self.status.last_reason = reason
        logger.info(f"Relay sync started: {reason}")

        try:
            clients = await self.client_repository.list()
            fallback_secret = await self.state_repository.get_fallback_secret()
            proxy_secrets = ActiveSecretSelector.select(clients, fallback_secret, self.max_secrets)

            try:
                await self.config_writer.write(proxy_secrets)
            except OSError as e:
                raise SyncOperationException(detail=f"Failed to write relay config: {e}", original_error=e)

            if self.reloader is not None:
                await self.reloader.reload()

        except SyncOperationException as e:
            self.status.last_sync_error = str(e)
            logger.error(f"Relay sync failed ({reason}): {e}")
            raise

        except Exception as e:
            self.status.last_sync_error = str(e)
            logger.exception(f"Relay sync failed ({reason}): {e}")
            raise SyncOperationException(detail=str(e), original_error=e)

        else:
            self.status.last_sync_at = utcnow()
            self.status.last_sync_error = None
            logger.info(f"Relay sync completed: {reason} ({len(proxy_secrets)} secrets)")

        finally:
            self.status.in_progress = False

        return self.snapshot()

    async def close(self) -> None:
        """Stop the worker and fail any request still waiting in the queue."""
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

        if self._queue is not None:
            while not self._queue.empty():
                request = self._queue.get_nowait()
                if not request.future.done():
                    request.future.set_exception(SyncOperationException(detail="Sync pipeline stopped"))
                self._queue.task_done()
