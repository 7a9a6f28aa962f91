# relaypanel/application/dtos/client_dto.py

"""
Schemas for proxy client data.

This module defines the Pydantic DTOs for validating and serializing
client requests and responses at the HTTP boundary.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from relaypanel.application.dtos.base_dto import CustomBaseModel


class ClientCreate(CustomBaseModel):
    """
    Schema for creating a client.

    Secret mode and expiry preset are kept as plain strings so that
    unknown values are rejected by the domain with a readable message.
    """
    name: Optional[str] = Field(None, description="Display label; defaults to client-<n>")
    secret_mode: str = Field("secure", description="plain, secure, fake_tls or custom")
    custom_secret: Optional[str] = Field(None, description="Credential string for custom mode")
    fake_tls_host: Optional[str] = Field(None, description="Disguise hostname for fake_tls mode")
    expires_preset: str = Field("1m", description="7d, 1m, 3m, 6m, 1y, never or custom")
    custom_expires_at: Optional[str] = Field(None, description="ISO-8601 instant for custom expiry")


class ClientUpdate(CustomBaseModel):
    """
    Schema for updating a client. Omitted fields keep their current value.
    """
    name: Optional[str] = None
    secret_mode: Optional[str] = None
    custom_secret: Optional[str] = None
    fake_tls_host: Optional[str] = None
    regenerate_secret: bool = False
    expires_preset: Optional[str] = None
    custom_expires_at: Optional[str] = None


class ClientOutput(CustomBaseModel):
    """
    Schema for returning a client, including its shareable proxy links.
    """
    id: str
    name: str
    secret_mode: str
    fake_tls_host: Optional[str] = None
    secret: str
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    expired: bool = False
    proxy_link: str = ""
    tg_link: str = ""


class SyncStatusOutput(CustomBaseModel):
    in_progress: bool
    last_sync_at: Optional[datetime] = None
    last_reason: Optional[str] = None
    last_sync_error: Optional[str] = None


class StatusOutput(CustomBaseModel):
    """
    Schema for the panel status snapshot.
    """
    sync_status: SyncStatusOutput
    total_clients: int
    active_clients: int
    proxy_secrets_file: str
    docker_sync_enabled: bool
    public_ip: Optional[str] = None
    public_ip_last_updated_at: Optional[datetime] = None
    public_ip_last_error: Optional[str] = None


class ClientListOutput(CustomBaseModel):
    clients: List[ClientOutput]


class ClientMutationOutput(CustomBaseModel):
    client: ClientOutput
    sync_status: SyncStatusOutput


class OperationOutput(CustomBaseModel):
    ok: bool = True
    sync_status: SyncStatusOutput


class CleanupOutput(OperationOutput):
    removed: int
