# relaypanel/application/use_cases/panel_use_cases.py

"""
Operations exposed to the HTTP layer.

Each registry mutation is persisted first and then synchronized; a sync
failure reaches the caller as SyncOperationException while the saved
change stays in place.
"""

import logging
from typing import List, Tuple

from relaypanel.application.dtos.client_dto import ClientCreate, ClientUpdate
from relaypanel.application.ports.inbound import IClientUseCase, IPanelUseCase, ISyncUseCase
from relaypanel.application.use_cases.background_tasks import PublicIpMonitor
from relaypanel.domain.models.client_domain_model import Client, CleanupResult, PanelStatus, SyncStatus
from relaypanel.domain.services.expiry_service import ExpiryService, utcnow

logger = logging.getLogger(__name__)


class PanelService(IPanelUseCase):
    """
    Facade combining the client registry, the sync pipeline and IP discovery.
    """

    def __init__(
            self,
            clients: IClientUseCase,
            sync: ISyncUseCase,
            ip_monitor: PublicIpMonitor,
            proxy_secrets_file: str,
            docker_sync_enabled: bool,
    ):
        self.clients = clients
        self.sync = sync
        self.ip_monitor = ip_monitor
        self.proxy_secrets_file = proxy_secrets_file
        self.docker_sync_enabled = docker_sync_enabled

    async def list_clients(self) -> List[Client]:
        return await self.clients.list_clients()

    async def create_client(self, data: ClientCreate) -> Tuple[Client, SyncStatus]:
        client = await self.clients.create_client(data)
        status = await self.sync.enqueue("create client")
        return client, status

    async def update_client(self, client_id: str, data: ClientUpdate) -> Tuple[Client, SyncStatus]:
        client = await self.clients.update_client(client_id, data)
        status = await self.sync.enqueue("update client")
        return client, status

    async def delete_client(self, client_id: str) -> SyncStatus:
        await self.clients.delete_client(client_id)
        return await self.sync.enqueue("delete client")

    async def trigger_manual_sync(self) -> SyncStatus:
        return await self.sync.enqueue("manual sync")

    async def trigger_cleanup(self) -> Tuple[CleanupResult, SyncStatus]:
        """
        Remove expired clients; sync only if something was removed.
        """
        result = await self.clients.cleanup_expired()
        if result.changed:
            return result, await self.sync.enqueue("manual cleanup")
        return result, self.sync.snapshot()

    async def get_status(self) -> PanelStatus:
        clients = await self.clients.list_clients()
        now = utcnow()
        active = sum(1 for client in clients if not ExpiryService.is_expired(client, now))
        return PanelStatus(
            total_clients=len(clients),
            active_clients=active,
            sync_status=self.sync.snapshot(),
            proxy_secrets_file=self.proxy_secrets_file,
            docker_sync_enabled=self.docker_sync_enabled,
            public_ip=self.ip_monitor.snapshot(),
        )
