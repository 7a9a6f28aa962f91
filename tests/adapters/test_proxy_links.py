"""
Tests for the advertised endpoint and shareable links.
"""

from relaypanel.shared.utils.ip_validation import normalize_ip
from relaypanel.shared.utils.proxy_links import make_proxy_links, resolve_public_endpoint


class TestNormalizeIp:

    def test_canonical_forms(self):
        assert normalize_ip(" 203.0.113.4 ") == "203.0.113.4"
        assert normalize_ip("2001:DB8:0::1") == "2001:db8::1"

    def test_rejects_hostnames_and_empty(self):
        assert normalize_ip("example.com") == ""
        assert normalize_ip(None) == ""


class TestResolvePublicEndpoint:

    def test_configured_host_wins(self):
        assert resolve_public_endpoint("proxy.example.com", 443, "203.0.113.1", "10.0.0.1") == \
            ("proxy.example.com", 443)

    def test_public_ip_before_request_host(self):
        assert resolve_public_endpoint("", 3443, "203.0.113.1", "panel.local") == ("203.0.113.1", 3443)

    def test_request_host(self):
        assert resolve_public_endpoint("", 3443, None, "panel.local") == ("panel.local", 3443)

    def test_loopback_and_default_port(self):
        assert resolve_public_endpoint("", 0, None, None) == ("127.0.0.1", 3443)


class TestMakeProxyLinks:

    def test_links(self):
        links = make_proxy_links("EE" + "a" * 32, "203.0.113.1", 3443)

        query = f"server=203.0.113.1&port=3443&secret=ee{'a' * 32}"
        assert links == {
            "proxy_link": f"https://t.me/proxy?{query}",
            "tg_link": f"tg://proxy?{query}",
        }
