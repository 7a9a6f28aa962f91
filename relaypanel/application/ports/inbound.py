# relaypanel/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import List, Tuple

from relaypanel.application.dtos.client_dto import ClientCreate, ClientUpdate
from relaypanel.domain.models.client_domain_model import Client, CleanupResult, PanelStatus, SyncStatus


class IClientUseCase(ABC):
    """Interface for the client registry."""

    @abstractmethod
    async def list_clients(self) -> List[Client]:
        """List all clients in registry order."""
        pass

    @abstractmethod
    async def create_client(self, data: ClientCreate) -> Client:
        """Create a client with a generated or validated credential."""
        pass

    @abstractmethod
    async def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        """Update an existing client."""
        pass

    @abstractmethod
    async def delete_client(self, client_id: str) -> None:
        """Delete a client."""
        pass

    @abstractmethod
    async def cleanup_expired(self) -> CleanupResult:
        """Remove expired clients."""
        pass


class ISyncUseCase(ABC):
    """Interface for relay synchronization."""

    @abstractmethod
    async def enqueue(self, reason: str) -> SyncStatus:
        """Queue a sync attempt and wait for its own outcome."""
        pass

    @abstractmethod
    def snapshot(self) -> SyncStatus:
        """Copy of the current sync status."""
        pass


class IPanelUseCase(ABC):
    """Interface for the operations exposed to the HTTP layer."""

    @abstractmethod
    async def list_clients(self) -> List[Client]:
        pass

    @abstractmethod
    async def create_client(self, data: ClientCreate) -> Tuple[Client, SyncStatus]:
        pass

    @abstractmethod
    async def update_client(self, client_id: str, data: ClientUpdate) -> Tuple[Client, SyncStatus]:
        pass

    @abstractmethod
    async def delete_client(self, client_id: str) -> SyncStatus:
        pass

    @abstractmethod
    async def trigger_manual_sync(self) -> SyncStatus:
        pass

    @abstractmethod
    async def trigger_cleanup(self) -> Tuple[CleanupResult, SyncStatus]:
        pass

    @abstractmethod
    async def get_status(self) -> PanelStatus:
        pass
