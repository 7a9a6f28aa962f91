"""
Tests for public IP discovery over HTTP.
"""

import httpx
import pytest

from relaypanel.adapters.outbound.network.public_ip import HttpPublicIpResolver, parse_ip_body
from relaypanel.domain.exceptions import PublicIpLookupException

PROVIDERS = ["https://one.test/json", "https://two.test/ip", "https://three.test/"]


def resolver_for(handler) -> HttpPublicIpResolver:
    return HttpPublicIpResolver(PROVIDERS, timeout=1.0, transport=httpx.MockTransport(handler))


class TestParsing:

    @pytest.mark.parametrize("body,expected", [
        ('{"ip": "203.0.113.5"}', "203.0.113.5"),
        ("198.51.100.2\n", "198.51.100.2"),
        ("2001:DB8::1", "2001:db8::1"),
        ("<html>", ""),
        ('{"ip": 12}', ""),
        ("[]", ""),
    ])
    def test_parse_ip_body(self, body, expected):
        assert parse_ip_body(body) == expected


class TestHttpPublicIpResolver:
    """Provider fallthrough."""

    async def test_first_provider_wins(self):
        seen = []

        def handler(request):
            seen.append(request.url.host)
            return httpx.Response(200, json={"ip": "203.0.113.9"})

        assert await resolver_for(handler).resolve() == "203.0.113.9"
        assert seen == ["one.test"]

    async def test_sends_user_agent(self):
        agents = []

        def handler(request):
            agents.append(request.headers["user-agent"])
            return httpx.Response(200, text="203.0.113.9")

        await resolver_for(handler).resolve()
        assert agents[0].startswith("relay-panel/")

    async def test_falls_through_errors_and_garbage(self):
        def handler(request):
            if request.url.host == "one.test":
                return httpx.Response(500)
            if request.url.host == "two.test":
                return httpx.Response(200, text="not an ip")
            return httpx.Response(200, text="198.51.100.77\n")

        assert await resolver_for(handler).resolve() == "198.51.100.77"

    async def test_network_error_falls_through(self):
        def handler(request):
            if request.url.host != "three.test":
                raise httpx.ConnectError("unreachable", request=request)
            return httpx.Response(200, text="198.51.100.8")

        assert await resolver_for(handler).resolve() == "198.51.100.8"

    async def test_all_fail(self):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(PublicIpLookupException, match="Failed to detect public IP"):
            await resolver_for(handler).resolve()
