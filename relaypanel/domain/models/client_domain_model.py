# relaypanel/domain/models/client_domain_model.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class SecretMode(str, Enum):
    """Encoding family of a client credential."""
    PLAIN = "plain"
    SECURE = "secure"
    FAKE_TLS = "fake_tls"
    CUSTOM = "custom"


@dataclass
class Client:
    """Domain model for a proxy-access client."""
    id: str
    name: str
    secret_mode: SecretMode
    secret: str  # Full credential string, lower-case hex
    created_at: datetime
    updated_at: datetime
    fake_tls_host: Optional[str] = None  # Only set for fake_tls
    expires_at: Optional[datetime] = None  # None means never


@dataclass
class SyncStatus:
    """Outcome of the most recent relay synchronization attempt."""
    in_progress: bool = False
    last_sync_at: Optional[datetime] = None
    last_reason: Optional[str] = None
    last_sync_error: Optional[str] = None


@dataclass
class PublicIpState:
    """Last known public address of the host (informational only)."""
    value: Optional[str] = None
    last_updated_at: Optional[datetime] = None
    last_error: Optional[str] = None


@dataclass
class CleanupResult:
    removed: int = 0
    changed: bool = False


@dataclass
class PanelStatus:
    total_clients: int
    active_clients: int
    sync_status: SyncStatus
    proxy_secrets_file: str
    docker_sync_enabled: bool
    public_ip: PublicIpState = field(default_factory=PublicIpState)
