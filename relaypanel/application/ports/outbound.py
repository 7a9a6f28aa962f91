# relaypanel/application/ports/outbound.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, List, Optional

from relaypanel.domain.models.client_domain_model import Client, CleanupResult


class ClientBatch:
    """
    Mutable view of the client collection inside a repository transaction.

    Changes are written back as a whole when the transaction ends,
    and only if something was changed.
    """

    def __init__(self, clients: List[Client]):
        self.clients = clients
        self.changed = False

    def __len__(self) -> int:
        return len(self.clients)

    def find_index(self, client_id: str) -> int:
        for idx, client in enumerate(self.clients):
            if client.id == client_id:
                return idx
        return -1

    def append(self, client: Client) -> None:
        self.clients.append(client)
        self.changed = True

    def replace(self, idx: int, client: Client) -> None:
        self.clients[idx] = client
        self.changed = True

    def remove(self, idx: int) -> Client:
        self.changed = True
        return self.clients.pop(idx)

    def retain(self, keep) -> int:
        """Keep only clients matching the predicate; return how many were dropped."""
        kept = [client for client in self.clients if keep(client)]
        removed = len(self.clients) - len(kept)
        if removed:
            self.clients[:] = kept
            self.changed = True
        return removed


class IClientRepository(ABC):
    """Client collection interface."""

    @abstractmethod
    async def list(self) -> List[Client]:
        """Return all clients in registry order."""
        pass

    @abstractmethod
    async def get(self, client_id: str) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def transaction(self) -> AsyncContextManager[ClientBatch]:
        """Serialized read-modify-write of the whole collection."""
        pass

    @abstractmethod
    async def cleanup_expired(self, now: Optional[datetime] = None) -> CleanupResult:
        """Remove every currently expired client in one pass."""
        pass


class IStateRepository(ABC):
    """Process singleton state interface."""

    @abstractmethod
    async def get_fallback_secret(self) -> str:
        """Return the fallback relay-level secret, creating it on first access."""
        pass


class IRelayConfigWriter(ABC):
    """Writes the relay configuration artifact."""

    @property
    @abstractmethod
    def path(self) -> str:
        pass

    @abstractmethod
    async def write(self, proxy_secrets: List[str]) -> None:
        """Atomically replace the artifact with the given secrets."""
        pass


class IRelayReloader(ABC):
    """Applies the configuration artifact to the running relay."""

    @abstractmethod
    async def reload(self) -> str:
        """
        Reload the relay.

        Raises:
            SyncOperationException: On error, timeout or non-zero exit
        """
        pass


class IPublicIpResolver(ABC):
    """Best-effort public address discovery."""

    @abstractmethod
    async def resolve(self) -> str:
        """
        Raises:
            PublicIpLookupException: If no provider returned a valid address
        """
        pass
