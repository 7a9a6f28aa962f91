"""
Shared fixtures for the test suite.
"""

import pytest

from relaypanel.adapters.configuration.config import Settings
from relaypanel.adapters.outbound.persistence.repositories.client_repository import JsonClientRepository
from relaypanel.adapters.outbound.persistence.repositories.state_repository import JsonStateRepository
from relaypanel.adapters.outbound.relay.config_writer import EnvFileRelayConfigWriter
from relaypanel.application.use_cases import AsyncClientService, SyncPipeline
from tests.helpers import FakeReloader


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATA_DIR=str(tmp_path / "data"),
        STACK_DIR=str(tmp_path / "stack"),
        ENABLE_DOCKER_SYNC=False,
        PUBLIC_IP_LOOKUP_ENABLED=False,
        ADMIN_API_TOKEN="test-token",
        ENVIRONMENT="testing",
        DEFAULT_FAKE_TLS_HOST="google.com",
        MAX_PROXY_SECRETS=16,
    )


@pytest.fixture
def client_repository(test_settings) -> JsonClientRepository:
    return JsonClientRepository(test_settings.CLIENTS_FILE)


@pytest.fixture
def state_repository(test_settings) -> JsonStateRepository:
    return JsonStateRepository(test_settings.STATE_FILE)


@pytest.fixture
def client_service(client_repository, test_settings) -> AsyncClientService:
    return AsyncClientService(client_repository, test_settings.DEFAULT_FAKE_TLS_HOST)


@pytest.fixture
def reloader() -> FakeReloader:
    return FakeReloader()


@pytest.fixture
async def sync_pipeline(client_repository, state_repository, reloader, test_settings):
    pipeline = SyncPipeline(
        client_repository=client_repository,
        state_repository=state_repository,
        config_writer=EnvFileRelayConfigWriter(test_settings.SECRETS_ENV_FILE),
        reloader=reloader,
        max_secrets=test_settings.max_proxy_secrets,
    )
    yield pipeline
    await pipeline.close()
