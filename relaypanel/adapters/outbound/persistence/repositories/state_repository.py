# relaypanel/adapters/outbound/persistence/repositories/state_repository.py

import asyncio
import logging
from typing import Any, Dict

from relaypanel.adapters.outbound.persistence.json_store import read_json, write_json
from relaypanel.application.ports.outbound import IStateRepository
from relaypanel.domain.exceptions import StorageOperationException
from relaypanel.domain.services.secret_service import SecretService

logger = logging.getLogger(__name__)


class JsonStateRepository(IStateRepository):
    """Repository for the process singleton state (state.json)."""

    def __init__(self, path: str):
        self.path = path
        self._lock = asyncio.Lock()
        self._fallback_secret: str = ""

    def _read_state(self) -> Dict[str, Any]:
        try:
            state = read_json(self.path, {})
        except (OSError, ValueError) as e:
            raise StorageOperationException(detail="Error reading state file", original_error=e)
        if not isinstance(state, dict):
            raise StorageOperationException(detail=f"State file '{self.path}' must contain a JSON object")
        return state

    def _load_or_create_fallback(self) -> str:
        state = self._read_state()
        current = SecretService.extract_relay_secret(state.get("fallbackProxySecret") or "")
        if current:
            return current

        # Older state files kept a full credential string under fallbackSecret
        migrated = SecretService.extract_relay_secret(state.get("fallbackSecret") or "")
        state["fallbackProxySecret"] = migrated or SecretService.random_hex()
        try:
            write_json(self.path, state)
        except OSError as e:
            raise StorageOperationException(detail="Error writing state file", original_error=e)

        if migrated:
            logger.info("Migrated legacy fallback secret into fallbackProxySecret")
        else:
            logger.info("Generated new fallback proxy secret")
        return state["fallbackProxySecret"]

    async def get_fallback_secret(self) -> str:
        """
        Get the fallback relay-level secret.

        Created lazily on first access and persisted; immutable afterwards.

        Returns:
            32 lower-case hex characters

        Raises:
            StorageOperationException: If the state file cannot be read or written
        """
        if self._fallback_secret:
            return self._fallback_secret

        async with self._lock:
            if not self._fallback_secret:
                self._fallback_secret = await asyncio.to_thread(self._load_or_create_fallback)
        return self._fallback_secret
