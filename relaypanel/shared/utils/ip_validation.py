# relaypanel/shared/utils/ip_validation.py

import ipaddress
from typing import Optional


def normalize_ip(value: Optional[str]) -> str:
    """
    Return the canonical text form of an IPv4 or IPv6 address.

    Args:
        value: Candidate address; surrounding whitespace is ignored

    Returns:
        Canonical address, or an empty string if the value is not an IP
    """
    text = (value or "").strip()
    try:
        return str(ipaddress.ip_address(text))
    except ValueError:
        return ""
