# relaypanel/shared/utils/proxy_links.py

"""
Shareable proxy links.

Builds the https://t.me/proxy and tg://proxy links an end user opens to
configure a client with a credential string.
"""

from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from relaypanel.domain.services.secret_service import SecretService
from relaypanel.shared.utils.ip_validation import normalize_ip

DEFAULT_PROXY_PORT = 3443


def resolve_public_endpoint(
        configured_host: str,
        configured_port: int,
        public_ip: Optional[str],
        request_host: Optional[str],
) -> Tuple[str, int]:
    """
    Pick the host and port advertised in proxy links.

    Host priority: configured host, discovered public IP, request host,
    loopback. Non-positive ports fall back to the default.
    """
    host_from_request = normalize_ip(request_host) or (request_host or "").strip() or "127.0.0.1"
    host = configured_host or public_ip or host_from_request
    port = configured_port if configured_port and configured_port > 0 else DEFAULT_PROXY_PORT
    return host, port


def make_proxy_links(secret: str, host: str, port: int) -> Dict[str, str]:
    query = urlencode({
        "server": host,
        "port": str(port),
        "secret": SecretService.normalize(secret),
    })
    return {
        "proxy_link": f"https://t.me/proxy?{query}",
        "tg_link": f"tg://proxy?{query}",
    }
