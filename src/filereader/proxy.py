"""Proxy selection from HTTP_PROXY / HTTPS_PROXY / NO_PROXY.

Resolution is split in two: ProxySettings is an immutable snapshot of the
environment, and a resolver decides when that snapshot is taken. The
cached resolver takes it once; the environment resolver takes a new one for
every request so variables changed at runtime are honored.
"""

import ipaddress
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Protocol
from urllib.parse import urlsplit
from urllib.request import proxy_bypass_environment

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class ProxyPolicy(str, Enum):
    """When proxy environment variables are read."""

    CACHED = "cached"
    PER_REQUEST = "per_request"


def _getenv_any(environ: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def _normalize_proxy_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if "://" not in value:
        value = "http://" + value
    return value


def _parse_ip(host: str):
    try:
        return ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return None


@dataclass(frozen=True)
class ProxySettings:
    """Snapshot of proxy environment variables."""

    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    no_proxy: str = ""

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ProxySettings":
        """Capture proxy settings, uppercase names taking precedence."""
        env = os.environ if environ is None else environ

        http_proxy = _getenv_any(env, "HTTP_PROXY", "http_proxy")
        if env.get("REQUEST_METHOD"):
            # Under CGI the HTTP_PROXY variable can be set by a client header
            http_proxy = None

        return cls(
            http_proxy=_normalize_proxy_url(http_proxy),
            https_proxy=_normalize_proxy_url(_getenv_any(env, "HTTPS_PROXY", "https_proxy")),
            no_proxy=_getenv_any(env, "NO_PROXY", "no_proxy") or "",
        )

    def proxy_for(self, url: str) -> Optional[str]:
        """Return the proxy URL to use for url, or None to connect directly."""
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme == "https":
            proxy = self.https_proxy
        elif scheme == "http":
            proxy = self.http_proxy
        else:
            return None
        if not proxy:
            return None

        host = (parts.hostname or "").lower()
        port = parts.port or DEFAULT_PORTS[scheme]
        if host == "localhost":
            return None
        ip = _parse_ip(host)
        if ip is not None and ip.is_loopback:
            return None
        if self._bypassed(host, port, ip):
            return None
        return proxy

    def _bypassed(self, host: str, port: int, ip) -> bool:
        """Match host against NO_PROXY entries.

        IP addresses and CIDR ranges are matched here against IP literal
        hosts. Everything else goes to urllib's NO_PROXY matching: a name
        matches itself and its subdomains, with or without a leading dot,
        and an entry with a port only matches that port.
        """
        names = []
        for entry in self.no_proxy.split(","):
            entry = entry.strip().lower()
            if not entry:
                continue
            if entry == "*":
                return True
            try:
                network = ipaddress.ip_network(entry.strip("[]"), strict=False)
            except ValueError:
                # urllib strips leading dots but not a "*." prefix
                names.append(entry[1:] if entry.startswith("*.") else entry)
                continue
            if ip is not None and ip.version == network.version and ip in network:
                return True

        if not names:
            return False
        host_port = f"[{host}]:{port}" if ip is not None and ip.version == 6 else f"{host}:{port}"
        return proxy_bypass_environment(host_port, {"no": ",".join(names)})


class ProxyResolver(Protocol):
    def proxy_for(self, url: str) -> Optional[str]:
        ...


class CachedProxyResolver:
    """Resolve proxies from a snapshot taken once, at construction."""

    def __init__(self, settings: Optional[ProxySettings] = None):
        self._settings = settings if settings is not None else ProxySettings.from_environ()
        logger.debug(
            "Proxy settings captured (https proxy: %s, http proxy: %s, no_proxy: %r)",
            bool(self._settings.https_proxy),
            bool(self._settings.http_proxy),
            self._settings.no_proxy,
        )

    @property
    def settings(self) -> ProxySettings:
        return self._settings

    def proxy_for(self, url: str) -> Optional[str]:
        return self._settings.proxy_for(url)


class EnvironmentProxyResolver:
    """Resolve proxies from the environment as it is at each request."""

    def proxy_for(self, url: str) -> Optional[str]:
        return ProxySettings.from_environ().proxy_for(url)


def resolver_for(policy: ProxyPolicy) -> ProxyResolver:
    if policy == ProxyPolicy.PER_REQUEST:
        return EnvironmentProxyResolver()
    return CachedProxyResolver()
