# relaypanel/adapters/outbound/persistence/models/client_record.py

"""
Persisted client record.

This module defines the ClientRecord model, the on-disk shape of a client
inside clients.json (camelCase keys, ISO-8601 UTC instants).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from relaypanel.domain.models.client_domain_model import Client, SecretMode


class ClientRecord(BaseModel):
    """
    Model representing a stored proxy client.

    Attributes:
        id: Unique identifier of the client
        name: Display label
        secret_mode: Encoding family of the credential
        fake_tls_host: Disguise hostname, only for fake_tls
        secret: Full credential string
        expires_at: Expiration instant, None for never
        created_at: Creation instant
        updated_at: Last update instant
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    secret_mode: SecretMode
    fake_tls_host: Optional[str] = None
    secret: str
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("expires_at", "created_at", "updated_at", mode="after")
    def ensure_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_domain(self) -> Client:
        return Client(
            id=self.id,
            name=self.name,
            secret_mode=self.secret_mode,
            fake_tls_host=self.fake_tls_host,
            secret=self.secret,
            expires_at=self.expires_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, client: Client) -> "ClientRecord":
        return cls(
            id=client.id,
            name=client.name,
            secret_mode=client.secret_mode,
            fake_tls_host=client.fake_tls_host,
            secret=client.secret,
            expires_at=client.expires_at,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def __repr__(self) -> str:
        return f"<ClientRecord(id={self.id}, mode={self.secret_mode.value})>"
