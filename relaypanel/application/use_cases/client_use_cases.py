# relaypanel/application/use_cases/client_use_cases.py

"""
Service for client management.

This module implements the client registry: creating, updating and
deleting proxy clients, including credential generation and expiry.
Every mutation is a serialized read-modify-write of the persisted
collection; synchronizing the relay afterwards is the caller's job.
"""

import logging
import uuid
from dataclasses import replace
from typing import List, Optional

from relaypanel.application.dtos.client_dto import ClientCreate, ClientUpdate
from relaypanel.application.ports.inbound import IClientUseCase
from relaypanel.application.ports.outbound import IClientRepository
from relaypanel.domain.exceptions import InvalidInputException, ResourceNotFoundException
from relaypanel.domain.models.client_domain_model import Client, CleanupResult, SecretMode
from relaypanel.domain.services.expiry_service import ExpiryService, utcnow
from relaypanel.domain.services.secret_service import SecretService
from relaypanel.shared.utils.input_validation import InputValidator

logger = logging.getLogger(__name__)


class AsyncClientService(IClientUseCase):
    """
    Service for client management.

    This class implements the business logic of the client registry:
    name defaults, credential generation per secret mode and expiry.
    """

    def __init__(self, repository: IClientRepository, default_fake_tls_host: str):
        self.repository = repository
        self.default_fake_tls_host = default_fake_tls_host

    def _resolve_fake_tls_host(self, *candidates: Optional[str]) -> str:
        for candidate in candidates:
            host = (candidate or "").strip()
            if host:
                return host
        return self.default_fake_tls_host.strip()

    @staticmethod
    def _check_hostname(host: str) -> None:
        valid, error = InputValidator.validate_hostname(host.lower())
        if not valid:
            raise InvalidInputException(detail=error)

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        cleaned = InputValidator.sanitize_name(name)
        if cleaned:
            valid, error = InputValidator.validate_name(cleaned)
            if not valid:
                raise InvalidInputException(detail=error, fields={"name": "invalid"})
        return cleaned

    async def list_clients(self) -> List[Client]:
        return await self.repository.list()

    async def get_client(self, client_id: str) -> Client:
        client = await self.repository.get(client_id)
        if not client:
            raise ResourceNotFoundException(detail="Client not found", resource_id=client_id)
        return client

    async def create_client(self, data: ClientCreate) -> Client:
        """
        Create a new client.

        Args:
            data: Validated creation payload

        Returns:
            The persisted client

        Raises:
            InvalidInputException: On bad mode, secret, host, name or expiry
            StorageOperationException: If the collection cannot be persisted
        """
        mode = SecretService.parse_mode(data.secret_mode)

        fake_tls_host = None
        if mode is SecretMode.FAKE_TLS:
            fake_tls_host = self._resolve_fake_tls_host(data.fake_tls_host)
            self._check_hostname(fake_tls_host)

        secret = SecretService.generate_secret(
            mode,
            fake_tls_host=fake_tls_host,
            custom_secret=data.custom_secret,
            default_fake_tls_host=self.default_fake_tls_host,
        )
        expires_at = ExpiryService.compute_expires_at(data.expires_preset, data.custom_expires_at)
        name = self._clean_name(data.name)
        now = utcnow()

        async with self.repository.transaction() as batch:
            client = Client(
                id=str(uuid.uuid4()),
                name=name or f"client-{len(batch) + 1}",
                secret_mode=mode,
                fake_tls_host=fake_tls_host,
                secret=secret,
                expires_at=expires_at,
                created_at=now,
                updated_at=now,
            )
            batch.append(client)

        logger.info(f"Client created: {client.id} ({client.name}, mode={mode.value})")
        return client

    async def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        """
        Update an existing client in place.

        The credential is rebuilt only when the mode changes, the fake TLS
        host changes, regeneration is requested, or the mode is custom.
        The expiry is recomputed only when a preset is supplied.

        Args:
            client_id: Client identifier
            data: Partial update payload

        Returns:
            The updated client

        Raises:
            ResourceNotFoundException: If the client does not exist
            InvalidInputException: On bad mode, secret, host, name or expiry
        """
        async with self.repository.transaction() as batch:
            idx = batch.find_index(client_id)
            if idx == -1:
                logger.warning(f"Client not found for update: {client_id}")
                raise ResourceNotFoundException(detail="Client not found", resource_id=client_id)

            current = batch.clients[idx]
            next_mode = SecretService.parse_mode(data.secret_mode) if data.secret_mode else current.secret_mode

            next_host = None
            if next_mode is SecretMode.FAKE_TLS:
                next_host = self._resolve_fake_tls_host(data.fake_tls_host, current.fake_tls_host)
                self._check_hostname(next_host)
            host_changed = next_mode is SecretMode.FAKE_TLS and next_host != (current.fake_tls_host or "").strip()

            next_secret = current.secret
            if SecretService.needs_regeneration(current.secret_mode, next_mode, host_changed, data.regenerate_secret):
                custom_secret = data.custom_secret
                if next_mode is SecretMode.CUSTOM and not (custom_secret or "").strip() \
                        and current.secret_mode is SecretMode.CUSTOM:
                    custom_secret = current.secret
                next_secret = SecretService.generate_secret(
                    next_mode,
                    fake_tls_host=next_host,
                    custom_secret=custom_secret,
                    default_fake_tls_host=self.default_fake_tls_host,
                )

            next_expires_at = current.expires_at
            if data.expires_preset is not None:
                next_expires_at = ExpiryService.compute_expires_at(data.expires_preset, data.custom_expires_at)

            next_name = current.name
            if data.name is not None:
                next_name = self._clean_name(data.name) or current.name

            updated = replace(
                current,
                name=next_name,
                secret_mode=next_mode,
                fake_tls_host=next_host,
                secret=next_secret,
                expires_at=next_expires_at,
                updated_at=utcnow(),
            )
            batch.replace(idx, updated)

        logger.info(f"Client updated: {client_id} (secret rotated: {updated.secret != current.secret})")
        return updated

    async def delete_client(self, client_id: str) -> None:
        """
        Delete a client by ID.

        Raises:
            ResourceNotFoundException: If the client is not found
        """
        async with self.repository.transaction() as batch:
            idx = batch.find_index(client_id)
            if idx == -1:
                logger.warning(f"Client not found for delete: {client_id}")
                raise ResourceNotFoundException(detail="Client not found", resource_id=client_id)
            batch.remove(idx)

        logger.info(f"Client deleted: {client_id}")

    async def cleanup_expired(self) -> CleanupResult:
        return await self.repository.cleanup_expired()
