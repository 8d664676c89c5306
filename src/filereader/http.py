"""HTTP(S) retrieval strategy built on httpx."""

import logging
import ssl

import httpx

from .errors import MalformedURIError, RemoteFetchFailedError, TransportError
from .proxy import ProxyResolver
from .uri import SourceKind, parse_uri

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS = 10


class HTTPFetcher:
    """Single-shot GET with the reader's TLS trust and proxy policy.

    A new httpx.Client is opened for every outgoing request, redirect hops
    included. Nothing is pooled, so each hop makes its own proxy decision
    and its own connection.
    """

    def __init__(
        self,
        ssl_context: ssl.SSLContext,
        proxy_resolver: ProxyResolver,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ):
        self._ssl_context = ssl_context
        self._proxy_resolver = proxy_resolver
        self._max_redirects = max_redirects

    @property
    def proxy_resolver(self) -> ProxyResolver:
        return self._proxy_resolver

    def fetch(self, url: str, scheme: str = "") -> bytes:
        """GET url, following redirects, and return the whole body.

        Raises:
            MalformedURIError: If httpx rejects url itself
            RemoteFetchFailedError: If the final response is not 2xx
            TransportError: On DNS, connection, TLS, proxy, redirect or body read failures
        """
        current = url
        for _ in range(self._max_redirects + 1):
            response = self._get(url, current, scheme)
            if not response.has_redirect_location:
                break
            current = self._redirect_target(url, response, scheme)
            logger.debug("Redirected to %s", current)
        else:
            error = httpx.TooManyRedirects(f"exceeded {self._max_redirects} redirects")
            raise TransportError(url, "too many redirects", scheme=scheme, cause=error) from error

        if not response.is_success:
            raise RemoteFetchFailedError(url, response.status_code, scheme=scheme)

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content

    def _get(self, url: str, current: str, scheme: str) -> httpx.Response:
        """Send one GET for current; url is the caller's URI, used in errors."""
        proxy = self._proxy_resolver.proxy_for(current)
        logger.debug("GET %s (%s)", current, "via proxy" if proxy else "direct connection")

        try:
            client = httpx.Client(
                verify=self._ssl_context,
                proxy=proxy,
                trust_env=False,
                timeout=None,
                follow_redirects=False,
            )
        except (httpx.InvalidURL, ValueError) as e:
            raise TransportError(url, f"invalid proxy {proxy!r}", scheme=scheme, cause=e) from e

        try:
            with client:
                return client.get(current)
        except (httpx.InvalidURL, UnicodeError) as e:
            if current == url:
                raise MalformedURIError(url, "invalid URL", scheme=scheme, cause=e) from e
            raise TransportError(
                url, f"invalid redirect target {current!r}", scheme=scheme, cause=e
            ) from e
        except httpx.RequestError as e:
            raise TransportError(url, "request failed", scheme=scheme, cause=e) from e

    def _redirect_target(self, url: str, response: httpx.Response, scheme: str) -> str:
        try:
            target = str(response.url.join(response.headers["location"]))
            parsed = parse_uri(target)
        except (httpx.InvalidURL, MalformedURIError) as e:
            raise TransportError(url, "invalid redirect location", scheme=scheme, cause=e) from e

        if parsed.kind != SourceKind.HTTP:
            raise TransportError(url, f"redirect to unsupported URL {target!r}", scheme=scheme)
        return target
