# relaypanel/adapters/outbound/persistence/repositories/client_repository.py

"""
Repository for client operations.

This module implements the file-backed client collection. The whole
collection lives in one JSON document which is rewritten atomically on
every mutation; mutations are serialized by a single asyncio lock so two
read-modify-write cycles never interleave.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional

from pydantic import ValidationError

from relaypanel.adapters.outbound.persistence.json_store import read_json, write_json
from relaypanel.adapters.outbound.persistence.models import ClientRecord
from relaypanel.application.ports.outbound import ClientBatch, IClientRepository
from relaypanel.domain.exceptions import StorageOperationException
from relaypanel.domain.models.client_domain_model import Client, CleanupResult
from relaypanel.domain.services.expiry_service import ExpiryService, utcnow

logger = logging.getLogger(__name__)


class JsonClientRepository(IClientRepository):
    """
    JSON file implementation of the client repository.
    """

    def __init__(self, path: str):
        self.path = path
        self._write_lock = asyncio.Lock()

    def _load_sync(self) -> List[Client]:
        try:
            document = read_json(self.path, [])
        except (OSError, ValueError) as e:
            logger.error(f"Error reading clients file '{self.path}': {str(e)}")
            raise StorageOperationException(detail="Error reading clients file", original_error=e)

        if not isinstance(document, list):
            raise StorageOperationException(detail=f"Clients file '{self.path}' must contain a JSON list")

        try:
            return [ClientRecord.model_validate(item).to_domain() for item in document]
        except ValidationError as e:
            logger.error(f"Invalid client record in '{self.path}': {str(e)}")
            raise StorageOperationException(detail="Invalid client record", original_error=e)

    def _save_sync(self, clients: List[Client]) -> None:
        document = [ClientRecord.from_domain(client).to_document() for client in clients]
        try:
            write_json(self.path, document)
        except OSError as e:
            logger.error(f"Error writing clients file '{self.path}': {str(e)}")
            raise StorageOperationException(detail="Error writing clients file", original_error=e)

    async def _load(self) -> List[Client]:
        return await asyncio.to_thread(self._load_sync)

    async def _save(self, clients: List[Client]) -> None:
        await asyncio.to_thread(self._save_sync, clients)

    async def initialize(self) -> None:
        """Create an empty collection file if none exists."""
        async with self._write_lock:
            clients = await self._load()
            if not clients:
                await self._save(clients)

    async def list(self) -> List[Client]:
        """
        List all clients in registry (creation) order.

        Returns:
            List of Client objects

        Raises:
            StorageOperationException: If the collection cannot be read
        """
        return await self._load()

    async def get(self, client_id: str) -> Optional[Client]:
        for client in await self._load():
            if client.id == client_id:
                return client
        return None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[ClientBatch]:
        """
        Provides a serialized read-modify-write context over the collection.

        The collection is written back only when the block exits normally
        and the batch reports a change.

        Yields:
            ClientBatch: Mutable view of the current collection
        """
        async with self._write_lock:
            batch = ClientBatch(await self._load())
            yield batch
            if batch.changed:
                await self._save(batch.clients)

    async def cleanup_expired(self, now: Optional[datetime] = None) -> CleanupResult:
        """
        Remove expired clients to keep the relay configuration current.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            Number of clients removed and whether the collection changed
        """
        now = now or utcnow()
        async with self.transaction() as batch:
            removed = batch.retain(lambda client: not ExpiryService.is_expired(client, now))

        if removed:
            logger.info(f"Removed {removed} expired clients")
        return CleanupResult(removed=removed, changed=removed > 0)
