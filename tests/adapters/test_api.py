"""
Tests for the HTTP API.
"""

import logging
import re
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from relaypanel.domain.services.secret_service import SecretService
from relaypanel.main import create_app
from tests.helpers import FakeReloader

AUTH = {"Authorization": "Bearer test-token"}


@pytest.fixture
def api(test_settings):
    with TestClient(create_app(test_settings)) as client:
        yield client


def container_of(api):
    return api.app.state.container


class TestAuth:

    def test_health_is_public(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_missing_token(self, api):
        response = api.get("/api/clients")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_wrong_token(self, api):
        response = api.get("/api/status", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


class TestStartup:

    def test_startup_writes_fallback_config(self, api, test_settings):
        fallback = (Path(test_settings.STATE_FILE).read_text(encoding="utf-8"))
        content = Path(test_settings.SECRETS_ENV_FILE).read_text(encoding="utf-8")

        assert re.search(r"^SECRET=[0-9a-f]{32}$", content, re.MULTILINE)
        assert content.split("SECRET=")[1].strip() in fallback

    def test_status(self, api, test_settings):
        response = api.get("/api/status", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["totalClients"] == 0
        assert body["activeClients"] == 0
        assert body["dockerSyncEnabled"] is False
        assert body["proxySecretsFile"] == test_settings.SECRETS_ENV_FILE
        assert body["syncStatus"]["lastReason"] == "startup"
        assert body["syncStatus"]["inProgress"] is False
        assert body["publicIp"] is None


class TestClientEndpoints:
    """Client lifecycle over HTTP."""

    def test_create_secure_client_syncs_relay(self, api, test_settings):
        response = api.post(
            "/api/clients",
            json={"name": "alice", "secretMode": "secure", "expiresPreset": "7d"},
            headers=AUTH,
        )

        assert response.status_code == 201
        body = response.json()
        client = body["client"]
        assert re.match(r"^ee[0-9a-f]{32}$", client["secret"])
        assert client["expiresAt"] is not None
        assert client["expired"] is False
        assert client["proxyLink"].startswith("https://t.me/proxy?server=testserver&port=3443&secret=ee")
        assert client["tgLink"].startswith("tg://proxy?")
        assert body["syncStatus"]["lastReason"] == "create client"
        assert body["syncStatus"]["lastSyncError"] is None

        content = Path(test_settings.SECRETS_ENV_FILE).read_text(encoding="utf-8")
        assert f"SECRET={SecretService.extract_relay_secret(client['secret'])}\n" in content

    def test_list_newest_first(self, api):
        for name in ("first", "second"):
            api.post("/api/clients", json={"name": name}, headers=AUTH)

        response = api.get("/api/clients", headers=AUTH)

        assert [c["name"] for c in response.json()["clients"]] == ["second", "first"]

    def test_update_to_never(self, api):
        created = api.post("/api/clients", json={"expiresPreset": "7d"}, headers=AUTH).json()["client"]

        response = api.put(f"/api/clients/{created['id']}", json={"expiresPreset": "never"}, headers=AUTH)

        assert response.status_code == 200
        updated = response.json()["client"]
        assert updated["expiresAt"] is None
        assert updated["secret"] == created["secret"]
        assert response.json()["syncStatus"]["lastReason"] == "update client"

    def test_delete(self, api):
        created = api.post("/api/clients", json={}, headers=AUTH).json()["client"]

        response = api.delete(f"/api/clients/{created['id']}", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert api.get("/api/clients", headers=AUTH).json()["clients"] == []

    def test_unknown_client_is_404(self, api):
        response = api.delete("/api/clients/missing", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["code"] == "RESOURCE_NOT_FOUND"

    def test_invalid_custom_secret_is_400(self, api):
        response = api.post(
            "/api/clients",
            json={"secretMode": "custom", "customSecret": "abc"},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        assert api.get("/api/clients", headers=AUTH).json()["clients"] == []

    def test_sync_failure_keeps_saved_change(self, api):
        container_of(api).sync.reloader = FakeReloader(fail_on=[1])

        response = api.post("/api/clients", json={"name": "kept"}, headers=AUTH)

        assert response.status_code == 500
        assert response.json()["code"] == "SYNC_ERROR"
        assert [c["name"] for c in api.get("/api/clients", headers=AUTH).json()["clients"]] == ["kept"]
        status = api.get("/api/status", headers=AUTH).json()["syncStatus"]
        assert status["lastSyncError"] == "reload 1 failed"


class TestOperations:

    def test_manual_sync(self, api):
        response = api.post("/api/sync", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["syncStatus"]["lastReason"] == "manual sync"

    def test_cleanup_without_expired_does_not_sync(self, api):
        response = api.post("/api/cleanup-expired", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["removed"] == 0
        assert response.json()["syncStatus"]["lastReason"] == "startup"


class TestRequestLogging:

    def test_syncing_call_is_logged_with_duration(self, api, caplog):
        caplog.set_level(logging.INFO, logger="relaypanel.shared.middleware.logging_middleware")

        api.post("/api/sync", headers=AUTH)

        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Registry/relay operation: 200 for POST /api/sync | Time: ") for m in messages)

    def test_read_call_is_plain_response(self, api, caplog):
        caplog.set_level(logging.INFO, logger="relaypanel.shared.middleware.logging_middleware")

        api.get("/health")

        assert any(r.getMessage().startswith("Response: 200 for GET /health") for r in caplog.records)

    def test_sync_failure_is_warning(self, api, caplog):
        caplog.set_level(logging.INFO, logger="relaypanel.shared.middleware.logging_middleware")
        container_of(api).sync.reloader = FakeReloader(fail_on=[1])

        response = api.post("/api/sync", headers=AUTH)

        assert response.status_code == 500
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any(r.getMessage().startswith("Request failed: POST /api/sync | SyncOperationException: reload 1 failed")
                   for r in warnings)
