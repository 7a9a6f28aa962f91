# relaypanel/core/container.py

"""
Service wiring.

Builds the repositories, adapters and use cases from a Settings instance.
The container is created inside the application lifespan and stored on
app.state, so every piece of shared mutable state (sync status, public IP)
has one owner and is reachable only through these services.
"""

import logging
import os
from dataclasses import dataclass

from relaypanel.adapters.configuration.config import Settings
from relaypanel.adapters.outbound.network.public_ip import HttpPublicIpResolver
from relaypanel.adapters.outbound.persistence.json_store import ensure_dir
from relaypanel.adapters.outbound.persistence.repositories.client_repository import JsonClientRepository
from relaypanel.adapters.outbound.persistence.repositories.state_repository import JsonStateRepository
from relaypanel.adapters.outbound.relay.config_writer import EnvFileRelayConfigWriter
from relaypanel.adapters.outbound.relay.docker_reloader import DockerComposeReloader
from relaypanel.application.use_cases import (
    AsyncClientService,
    BackgroundScheduler,
    PanelService,
    PublicIpMonitor,
    SyncPipeline,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    client_repository: JsonClientRepository
    state_repository: JsonStateRepository
    clients: AsyncClientService
    sync: SyncPipeline
    ip_monitor: PublicIpMonitor
    scheduler: BackgroundScheduler
    panel: PanelService


def build_container(settings: Settings) -> ServiceContainer:
    client_repository = JsonClientRepository(settings.CLIENTS_FILE)
    state_repository = JsonStateRepository(settings.STATE_FILE)

    reloader = None
    if settings.ENABLE_DOCKER_SYNC:
        reloader = DockerComposeReloader(
            compose_file=settings.COMPOSE_FILE,
            project_name=settings.COMPOSE_PROJECT_NAME,
            service_name=settings.RELAY_SERVICE_NAME,
            stack_dir=settings.STACK_DIR,
            timeout=settings.RELOAD_TIMEOUT_SECONDS,
        )

    resolver = None
    if settings.PUBLIC_IP_LOOKUP_ENABLED and settings.PUBLIC_IP_PROVIDERS:
        resolver = HttpPublicIpResolver(
            providers=settings.PUBLIC_IP_PROVIDERS,
            timeout=settings.PUBLIC_IP_LOOKUP_TIMEOUT_SECONDS,
        )

    clients = AsyncClientService(client_repository, settings.DEFAULT_FAKE_TLS_HOST)
    sync = SyncPipeline(
        client_repository=client_repository,
        state_repository=state_repository,
        config_writer=EnvFileRelayConfigWriter(settings.SECRETS_ENV_FILE),
        reloader=reloader,
        max_secrets=settings.max_proxy_secrets,
    )
    ip_monitor = PublicIpMonitor(resolver)
    scheduler = BackgroundScheduler(
        clients=clients,
        sync=sync,
        ip_monitor=ip_monitor,
        cleanup_interval=settings.cleanup_interval,
        ip_refresh_interval=settings.public_ip_refresh_interval,
    )
    panel = PanelService(
        clients=clients,
        sync=sync,
        ip_monitor=ip_monitor,
        proxy_secrets_file=settings.SECRETS_ENV_FILE,
        docker_sync_enabled=settings.ENABLE_DOCKER_SYNC,
    )

    return ServiceContainer(
        settings=settings,
        client_repository=client_repository,
        state_repository=state_repository,
        clients=clients,
        sync=sync,
        ip_monitor=ip_monitor,
        scheduler=scheduler,
        panel=panel,
    )


async def run_startup_tasks(container: ServiceContainer) -> None:
    """
    Prepare persisted state, refresh derived state and start background tasks.

    A failing startup sync is logged and does not stop the application;
    the relay stack may simply not be up yet.
    """
    settings = container.settings
    ensure_dir(settings.DATA_DIR)
    ensure_dir(os.path.dirname(os.path.abspath(settings.SECRETS_ENV_FILE)))

    await container.client_repository.initialize()
    await container.state_repository.get_fallback_secret()

    cleanup = await container.clients.cleanup_expired()
    if cleanup.changed:
        logger.info(f"Removed {cleanup.removed} expired clients at startup")

    await container.ip_monitor.refresh()

    try:
        await container.sync.enqueue("startup")
    except Exception as e:
        logger.warning(f"Startup sync failed, continuing: {e}")

    container.scheduler.start()


async def run_shutdown_tasks(container: ServiceContainer) -> None:
    await container.scheduler.stop()
    await container.sync.close()
