"""
Tests for active secret selection.
"""

from datetime import datetime, timedelta, timezone

from relaypanel.domain.models.client_domain_model import SecretMode
from relaypanel.domain.services.selection_service import ActiveSecretSelector
from tests.helpers import make_client

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)
FALLBACK = "f" * 32


def hex32(char: str) -> str:
    return char * 32


class TestActiveSecretSelector:
    """Selection, deduplication and capacity."""

    def test_empty_registry_uses_fallback(self):
        assert ActiveSecretSelector.select([], FALLBACK, 16, NOW) == [FALLBACK]

    def test_only_expired_clients_uses_fallback(self):
        clients = [make_client(hex32("a"), expires_at=NOW - timedelta(days=1))]
        assert ActiveSecretSelector.select(clients, FALLBACK, 16, NOW) == [FALLBACK]

    def test_expired_clients_are_skipped(self):
        clients = [
            make_client(hex32("a"), expires_at=NOW - timedelta(days=1)),
            make_client(hex32("b"), expires_at=NOW + timedelta(days=1)),
            make_client(hex32("c")),
        ]
        assert ActiveSecretSelector.select(clients, FALLBACK, 16, NOW) == [hex32("b"), hex32("c")]

    def test_plain_and_secure_with_same_bytes_are_deduplicated(self):
        clients = [
            make_client(hex32("a"), SecretMode.PLAIN),
            make_client("ee" + hex32("a"), SecretMode.SECURE),
            make_client("dd" + hex32("a") + "6162", SecretMode.FAKE_TLS),
        ]
        assert ActiveSecretSelector.select(clients, FALLBACK, 16, NOW) == [hex32("a")]

    def test_registry_order_is_preserved(self):
        clients = [make_client(hex32(c)) for c in "cab"]
        assert ActiveSecretSelector.select(clients, FALLBACK, 16, NOW) == [hex32("c"), hex32("a"), hex32("b")]

    def test_unusable_secret_is_skipped(self):
        clients = [make_client("not-a-secret"), make_client(hex32("b"))]
        assert ActiveSecretSelector.select(clients, FALLBACK, 16, NOW) == [hex32("b")]

    def test_cap_truncates_in_order(self):
        clients = [make_client(hex32(c)) for c in "0123456789"]
        assert ActiveSecretSelector.select(clients, FALLBACK, 3, NOW) == [hex32("0"), hex32("1"), hex32("2")]

    def test_cap_counts_unique_secrets(self):
        clients = [make_client(hex32("a")), make_client("ee" + hex32("a")), make_client(hex32("b"))]
        assert ActiveSecretSelector.select(clients, FALLBACK, 2, NOW) == [hex32("a"), hex32("b")]

    def test_non_positive_cap_allows_one(self):
        clients = [make_client(hex32("a")), make_client(hex32("b"))]
        assert ActiveSecretSelector.select(clients, FALLBACK, 0, NOW) == [hex32("a")]
