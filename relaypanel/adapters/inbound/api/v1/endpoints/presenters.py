# relaypanel/adapters/inbound/api/v1/endpoints/presenters.py

from fastapi import Request

from relaypanel.application.dtos.client_dto import ClientOutput, StatusOutput, SyncStatusOutput
from relaypanel.core.container import ServiceContainer
from relaypanel.domain.models.client_domain_model import Client, PanelStatus, SyncStatus
from relaypanel.domain.services.expiry_service import ExpiryService
from relaypanel.shared.utils.proxy_links import make_proxy_links, resolve_public_endpoint


def present_sync_status(sync_status: SyncStatus) -> SyncStatusOutput:
    return SyncStatusOutput(
        in_progress=sync_status.in_progress,
        last_sync_at=sync_status.last_sync_at,
        last_reason=sync_status.last_reason,
        last_sync_error=sync_status.last_sync_error,
    )


def present_client(client: Client, request: Request, container: ServiceContainer) -> ClientOutput:
    """Convert a domain client into its HTTP representation with proxy links."""
    settings = container.settings
    host, port = resolve_public_endpoint(
        configured_host=settings.PROXY_PUBLIC_HOST,
        configured_port=settings.PROXY_PUBLIC_PORT,
        public_ip=container.ip_monitor.state.value,
        request_host=request.url.hostname,
    )
    links = make_proxy_links(client.secret, host, port)
    return ClientOutput(
        id=client.id,
        name=client.name,
        secret_mode=client.secret_mode.value,
        fake_tls_host=client.fake_tls_host,
        secret=client.secret,
        expires_at=client.expires_at,
        created_at=client.created_at,
        updated_at=client.updated_at,
        expired=ExpiryService.is_expired(client),
        **links,
    )


def present_status(panel_status: PanelStatus) -> StatusOutput:
    return StatusOutput(
        sync_status=present_sync_status(panel_status.sync_status),
        total_clients=panel_status.total_clients,
        active_clients=panel_status.active_clients,
        proxy_secrets_file=panel_status.proxy_secrets_file,
        docker_sync_enabled=panel_status.docker_sync_enabled,
        public_ip=panel_status.public_ip.value,
        public_ip_last_updated_at=panel_status.public_ip.last_updated_at,
        public_ip_last_error=panel_status.public_ip.last_error,
    )
