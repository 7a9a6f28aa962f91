# relaypanel/adapters/outbound/network/public_ip.py

"""
Public IP discovery.

Asks a fixed, ordered list of HTTP services for the host's public address
and accepts the first syntactically valid IP. Any provider failure falls
through to the next one.
"""

import json
import logging
from typing import List, Optional

import httpx

from relaypanel import __version__
from relaypanel.application.ports.outbound import IPublicIpResolver
from relaypanel.domain.exceptions import PublicIpLookupException
from relaypanel.shared.utils.ip_validation import normalize_ip

logger = logging.getLogger(__name__)

USER_AGENT = f"relay-panel/{__version__}"


def parse_ip_body(body: str) -> str:
    """Accept either a bare address or a JSON object with an `ip` field."""
    text = body.strip()
    if text.startswith("{"):
        try:
            return normalize_ip(str(json.loads(text).get("ip", "")))
        except (ValueError, AttributeError):
            return ""
    return normalize_ip(text)


class HttpPublicIpResolver(IPublicIpResolver):
    """
    httpx-based public IP resolver.
    """

    def __init__(
            self,
            providers: List[str],
            timeout: float = 5.0,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.providers = list(providers)
        self.timeout = timeout
        self._transport = transport

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> str:
        response = await client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return parse_ip_body(response.text)

    async def resolve(self) -> str:
        """
        Resolve the public IP address.

        Returns:
            The first valid address returned by a provider

        Raises:
            PublicIpLookupException: If every provider failed
        """
        async with httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
        ) as client:
            for url in self.providers:
                try:
                    ip = await self._fetch(client, url)
                except (httpx.HTTPError, UnicodeDecodeError) as e:
                    logger.debug(f"Public IP provider failed: {url} ({e})")
                    continue
                if ip:
                    return ip
                logger.debug(f"Public IP provider returned no valid address: {url}")

        raise PublicIpLookupException()
