"""Tests for proxy settings and resolvers."""

import pytest

from filereader.proxy import (
    CachedProxyResolver,
    EnvironmentProxyResolver,
    ProxyPolicy,
    ProxySettings,
    resolver_for,
)

PROXY = "http://proxy.internal:3128"


class TestProxySettingsFromEnviron:
    """Reading proxy variables."""

    def test_empty_environment(self):
        settings = ProxySettings.from_environ({})
        assert settings == ProxySettings()

    def test_uppercase_takes_precedence(self):
        settings = ProxySettings.from_environ(
            {"HTTPS_PROXY": "http://upper:1", "https_proxy": "http://lower:2"}
        )
        assert settings.https_proxy == "http://upper:1"

    def test_lowercase_fallback(self):
        settings = ProxySettings.from_environ({"http_proxy": "http://lower:2", "no_proxy": "a.com"})
        assert settings.http_proxy == "http://lower:2"
        assert settings.no_proxy == "a.com"

    def test_scheme_defaults_to_http(self):
        settings = ProxySettings.from_environ({"HTTPS_PROXY": "proxy.internal:3128"})
        assert settings.https_proxy == PROXY

    def test_http_proxy_ignored_under_cgi(self):
        settings = ProxySettings.from_environ(
            {"HTTP_PROXY": PROXY, "HTTPS_PROXY": PROXY, "REQUEST_METHOD": "GET"}
        )
        assert settings.http_proxy is None
        assert settings.https_proxy == PROXY


class TestProxyFor:
    """Choosing a proxy for a URL."""

    def test_scheme_selects_variable(self):
        settings = ProxySettings(http_proxy="http://plain:1", https_proxy="http://secure:2")
        assert settings.proxy_for("http://example.com/") == "http://plain:1"
        assert settings.proxy_for("https://example.com/") == "http://secure:2"

    def test_no_proxy_configured(self):
        assert ProxySettings().proxy_for("https://example.com/") is None

    @pytest.mark.parametrize(
        "url",
        [
            "https://localhost/file",
            "https://127.0.0.1:8443/file",
            "https://127.1.2.3/file",
            "https://[::1]:8443/file",
        ],
    )
    def test_loopback_is_direct(self, url):
        assert ProxySettings(https_proxy=PROXY).proxy_for(url) is None

    @pytest.mark.parametrize(
        "no_proxy,url,bypassed",
        [
            ("*", "https://example.com/", True),
            ("example.com", "https://example.com/", True),
            ("example.com", "https://api.example.com/", True),
            ("example.com", "https://notexample.com/", False),
            (".example.com", "https://api.example.com/", True),
            (".example.com", "https://example.com/", True),
            ("api.example.com", "https://example.com/", False),
            ("*.example.com", "https://api.example.com/", True),
            ("example.com:8443", "https://example.com:8443/", True),
            ("example.com:8443", "https://example.com/", False),
            ("10.0.0.0/8", "https://10.1.2.3/", True),
            ("10.0.0.0/8", "https://11.1.2.3/", False),
            ("192.168.1.5", "https://192.168.1.5/", True),
            ("[2001:db8::1]:443", "https://[2001:db8::1]/", True),
            ("other.com, example.com", "https://example.com/", True),
            ("", "https://example.com/", False),
        ],
    )
    def test_no_proxy(self, no_proxy, url, bypassed):
        settings = ProxySettings(https_proxy=PROXY, no_proxy=no_proxy)
        expected = None if bypassed else PROXY
        assert settings.proxy_for(url) == expected


class TestResolvers:
    """Cached versus per-request resolution."""

    def test_cached_resolver_ignores_later_changes(self, monkeypatch):
        resolver = CachedProxyResolver()
        monkeypatch.setenv("HTTPS_PROXY", PROXY)
        assert resolver.proxy_for("https://example.com/") is None

    def test_cached_resolver_keeps_snapshot(self, monkeypatch):
        monkeypatch.setenv("HTTPS_PROXY", PROXY)
        resolver = CachedProxyResolver()
        monkeypatch.delenv("HTTPS_PROXY")
        assert resolver.proxy_for("https://example.com/") == PROXY
        assert resolver.settings.https_proxy == PROXY

    def test_environment_resolver_sees_changes(self, monkeypatch):
        resolver = EnvironmentProxyResolver()
        assert resolver.proxy_for("https://example.com/") is None

        monkeypatch.setenv("HTTPS_PROXY", PROXY)
        assert resolver.proxy_for("https://example.com/") == PROXY

        monkeypatch.setenv("NO_PROXY", "example.com")
        assert resolver.proxy_for("https://example.com/") is None

    def test_resolver_for_policy(self):
        assert isinstance(resolver_for(ProxyPolicy.CACHED), CachedProxyResolver)
        assert isinstance(resolver_for(ProxyPolicy.PER_REQUEST), EnvironmentProxyResolver)
