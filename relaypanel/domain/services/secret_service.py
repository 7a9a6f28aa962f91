# relaypanel/domain/services/secret_service.py

"""
Domain service for proxy credential strings.

A credential string is what an end user pastes into a client application.
It always embeds a relay-level secret: the 16-byte value (32 lower-case
hex characters) that the relay process actually compares against.

    plain     <32 hex>
    secure    ee<32 hex>
    fake_tls  dd<32 hex><hex of ascii hostname>
    custom    user supplied, one of the shapes above
"""

import re
import secrets
from typing import Optional, Union

from relaypanel.domain.exceptions import InvalidInputException
from relaypanel.domain.models.client_domain_model import SecretMode

RELAY_SECRET_BYTES = 16

HEX_PATTERN = re.compile(r'^[0-9a-f]+$')
PLAIN_SECRET_PATTERN = re.compile(r'^[0-9a-f]{32}$')
PREFIXED_SECRET_PATTERN = re.compile(r'^(ee|dd)[0-9a-f]{32}')

SECURE_PREFIX = "ee"
FAKE_TLS_PREFIX = "dd"


class SecretService:
    """
    Generation, validation and extraction of credential strings.
    """

    @staticmethod
    def normalize(secret: Optional[str]) -> str:
        return (secret or "").strip().lower()

    @staticmethod
    def random_hex(num_bytes: int = RELAY_SECRET_BYTES) -> str:
        return secrets.token_hex(num_bytes)

    @staticmethod
    def host_to_hex(host: str) -> str:
        return host.encode("utf-8").hex()

    @classmethod
    def extract_relay_secret(cls, secret: Optional[str]) -> str:
        """
        Extract the relay-level secret embedded in a credential string.

        Args:
            secret: Any credential string

        Returns:
            32 lower-case hex characters, or an empty string when the
            credential does not embed a usable secret
        """
        normalized = cls.normalize(secret)
        if PLAIN_SECRET_PATTERN.match(normalized):
            return normalized

        if PREFIXED_SECRET_PATTERN.match(normalized):
            return normalized[2:34]

        return ""

    @classmethod
    def validate_custom_secret(cls, secret: Optional[str]) -> str:
        """
        Validate a user-supplied credential string and return its canonical form.

        Raises:
            InvalidInputException: If the value is not even-length hex
                or does not embed a relay-level secret
        """
        normalized = cls.normalize(secret)
        if not HEX_PATTERN.match(normalized):
            raise InvalidInputException(detail="Custom secret must be a hex string")
        if len(normalized) % 2 != 0:
            raise InvalidInputException(detail="Custom secret length must be even")
        if not cls.extract_relay_secret(normalized):
            raise InvalidInputException(detail="Custom secret must be 32 hex or ee/dd + 32 hex")
        return normalized

    @staticmethod
    def parse_mode(secret_mode: Union[str, SecretMode, None]) -> SecretMode:
        try:
            return SecretMode(secret_mode)
        except ValueError:
            raise InvalidInputException(detail=f"Unknown secret mode: {secret_mode!r}")

    @classmethod
    def generate_secret(
            cls,
            secret_mode: Union[str, SecretMode],
            fake_tls_host: Optional[str] = None,
            custom_secret: Optional[str] = None,
            default_fake_tls_host: str = "",
    ) -> str:
        """
        Produce a credential string for the given mode.

        Args:
            secret_mode: Encoding family
            fake_tls_host: Disguise hostname (fake_tls only)
            custom_secret: User value (custom only)
            default_fake_tls_host: Hostname used when fake_tls_host is empty

        Returns:
            Credential string in canonical lower-case hex

        Raises:
            InvalidInputException: On unknown mode, empty host or bad custom value
        """
        mode = cls.parse_mode(secret_mode)

        if mode is SecretMode.PLAIN:
            return cls.random_hex()

        if mode is SecretMode.SECURE:
            return f"{SECURE_PREFIX}{cls.random_hex()}"

        if mode is SecretMode.FAKE_TLS:
            host = (fake_tls_host or default_fake_tls_host or "").strip().lower()
            if not host:
                raise InvalidInputException(detail="fake TLS host cannot be empty")
            return f"{FAKE_TLS_PREFIX}{cls.random_hex()}{cls.host_to_hex(host)}"

        return cls.validate_custom_secret(custom_secret)

    @staticmethod
    def needs_regeneration(
            current_mode: SecretMode,
            next_mode: SecretMode,
            host_changed: bool,
            regenerate_requested: bool,
    ) -> bool:
        """
        Decide whether an update must produce a new credential string.

        custom always re-validates, any mode change regenerates, a host
        change only matters for fake_tls, and an explicit request wins.

        | next_mode | mode changed | host changed | requested | result |
        |-----------|--------------|--------------|-----------|--------|
        | custom    | any          | any          | any       | True   |
        | other     | True         | any          | any       | True   |
        | fake_tls  | False        | True         | any       | True   |
        | other     | False        | any          | True      | True   |
        | other     | False        | False        | False     | False  |
        """
        if next_mode is SecretMode.CUSTOM:
            return True
        if next_mode is not current_mode:
            return True
        if next_mode is SecretMode.FAKE_TLS and host_changed:
            return True
        return bool(regenerate_requested)
