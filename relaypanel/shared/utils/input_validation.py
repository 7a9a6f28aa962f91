# relaypanel/shared/utils/input_validation.py

import re
from typing import Optional, Tuple


class InputValidator:
    """
    Validation and sanitization of user input,
    complementing the Pydantic validations.
    """

    # Limits
    MAX_NAME_LENGTH = 100
    MAX_HOSTNAME_LENGTH = 253

    # Letters, digits, dots and hyphens; no scheme, port or path
    HOSTNAME_PATTERN = re.compile(r'^[a-z0-9]([a-z0-9\-\.]*[a-z0-9])?$')
    # Control characters break logs and the relay env file
    CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')

    @classmethod
    def sanitize_name(cls, name: Optional[str]) -> str:
        """
        Sanitize a name by trimming and collapsing inner whitespace.

        Args:
            name: String to sanitize

        Returns:
            Sanitized string (empty if the input was blank)
        """
        return re.sub(r'\s+', ' ', (name or "").strip())

    @classmethod
    def validate_name(cls, name: str) -> Tuple[bool, Optional[str]]:
        """
        Validate an already sanitized, non-empty client name.

        Returns:
            Tuple (valid, error_message)
        """
        if len(name) > cls.MAX_NAME_LENGTH:
            return False, f"Name is too long (maximum {cls.MAX_NAME_LENGTH} characters)"

        if cls.CONTROL_CHARS.search(name):
            return False, "Name contains control characters"

        return True, None

    @classmethod
    def validate_hostname(cls, host: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a fake TLS disguise hostname.

        Args:
            host: Trimmed, lower-cased hostname

        Returns:
            Tuple (valid, error_message)
        """
        if not host:
            return False, "fake TLS host cannot be empty"

        if len(host) > cls.MAX_HOSTNAME_LENGTH:
            return False, f"fake TLS host is too long (maximum {cls.MAX_HOSTNAME_LENGTH} characters)"

        if not cls.HOSTNAME_PATTERN.match(host):
            return False, "fake TLS host must be a plain hostname"

        return True, None
