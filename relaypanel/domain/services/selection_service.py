# relaypanel/domain/services/selection_service.py

from datetime import datetime
from typing import Iterable, List, Optional

from relaypanel.domain.models.client_domain_model import Client
from relaypanel.domain.services.expiry_service import ExpiryService
from relaypanel.domain.services.secret_service import SecretService


class ActiveSecretSelector:
    """
    Domain service deriving the relay-level secrets the relay should accept.
    """

    @staticmethod
    def select(
            clients: Iterable[Client],
            fallback_secret: str,
            max_count: int,
            now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Select the deduplicated, capacity-bounded active secrets.

        Registry order is preserved and the first occurrence of a secret wins.
        The result is never empty: with no usable active client it holds
        only the fallback secret.

        Args:
            clients: Clients in registry order
            fallback_secret: Relay-level secret used when nothing is active
            max_count: Cap on returned secrets (at least 1 is always allowed)
            now: Reference time for the expiry check

        Returns:
            Ordered list of 32-hex relay-level secrets
        """
        limit = max(1, max_count)
        unique: List[str] = []
        seen = set()

        for client in clients:
            if ExpiryService.is_expired(client, now):
                continue

            extracted = SecretService.extract_relay_secret(client.secret)
            if not extracted:
                continue

            if extracted not in seen:
                seen.add(extracted)
                unique.append(extracted)
            if len(unique) >= limit:
                break

        if not unique:
            return [fallback_secret]
        return unique
