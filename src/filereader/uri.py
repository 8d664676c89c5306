"""URI parsing and source classification for read_file."""

import ipaddress
import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

import httpx

from .errors import MalformedURIError

EMBED_SCHEME = "embed"
HTTP_SCHEMES = ("http", "https")

# RFC 3986: scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class SourceKind(Enum):
    """Closed set of places a URI can point at."""

    LOCAL = "local"
    EMBED = "embed"
    HTTP = "http"


@dataclass(frozen=True)
class ParsedURI:
    """A URI split into the pieces the reader dispatches on.

    location is the local path for LOCAL, the path relative to the bundled
    filesystem root for EMBED, and the full URL for HTTP.
    """

    uri: str
    kind: SourceKind
    scheme: str
    location: str


def parse_uri(uri: str) -> ParsedURI:
    """Classify a URI by scheme.

    Anything that is not embed, http or https, including strings with no
    scheme at all, is a local path and is used verbatim.

    Raises:
        MalformedURIError: If the string is not a valid URI of any form
    """
    if _CONTROL_CHARS.search(uri):
        raise MalformedURIError(uri, "invalid control character in URI")
    if uri.startswith(":"):
        raise MalformedURIError(uri, "missing protocol scheme")

    match = _SCHEME_PATTERN.match(uri)
    scheme = match.group(1).lower() if match else ""

    if scheme == EMBED_SCHEME:
        return ParsedURI(uri, SourceKind.EMBED, scheme, uri[match.end():].lstrip("/"))

    if scheme in HTTP_SCHEMES:
        _validate_http_url(uri, scheme)
        return ParsedURI(uri, SourceKind.HTTP, scheme, uri)

    return ParsedURI(uri, SourceKind.LOCAL, scheme, uri)


def _validate_http_url(uri: str, scheme: str) -> None:
    try:
        parts = urlsplit(uri)
        # Accessing .port validates it
        parts.port
        # httpx parses the URL again when sending, including IDNA encoding
        host = httpx.URL(uri).raw_host.decode("ascii")
    except (ValueError, httpx.InvalidURL) as e:
        raise MalformedURIError(uri, "invalid URL", scheme=scheme, cause=e) from e

    if not parts.hostname or not host:
        raise MalformedURIError(uri, "missing host in URL", scheme=scheme)
    if not _is_valid_hostname(host):
        raise MalformedURIError(uri, f"invalid host name {host!r}", scheme=scheme)


def _is_valid_hostname(host: str) -> bool:
    """Check DNS label rules: 1-63 characters per label, 253 in total.

    IP literals are accepted as is. A single trailing dot is allowed.
    """
    try:
        ipaddress.ip_address(host.strip("[]"))
        return True
    except ValueError:
        pass

    name = host[:-1] if host.endswith(".") else host
    if not name or len(name) > 253:
        return False
    return all(0 < len(label) <= 63 for label in name.split("."))
