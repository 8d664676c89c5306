"""Reader - fetch bytes from local paths, bundled files, or HTTP(S) URLs."""

import logging
from pathlib import Path

from .certs import build_ssl_context
from .config import ReaderConfig, ReaderOption, apply_options
from .errors import (
    AccessDeniedError,
    NotFoundError,
    UnsupportedSourceError,
)
from .http import HTTPFetcher
from .proxy import resolver_for
from .uri import ParsedURI, SourceKind, parse_uri

logger = logging.getLogger(__name__)


class Reader:
    """Uniform file retrieval across local disk, bundled files and HTTP(S).

    Usage:
        reader = Reader(
            with_embed_fs(ResourceFS.for_package("myapp.manifests")),
            with_root_ca_certs([corporate_ca_pem]),
            with_non_cached_proxy_config(),
        )

        reader.read_file("config/cluster.yaml")               # local path
        reader.read_file("embed:///templates/cluster.yaml")   # bundled file
        reader.read_file("https://example.com/cluster.yaml")  # network

    The reader is immutable once built and can be shared between threads.
    Failures raise ReadFileError subclasses; nothing is retried or cached.
    """

    def __init__(self, *options: ReaderOption):
        config = apply_options(ReaderConfig(), options)
        self._config = config
        self._http = HTTPFetcher(
            build_ssl_context(config.trusted_roots),
            resolver_for(config.proxy_policy),
        )

    @classmethod
    def from_config(cls, config: ReaderConfig, *options: ReaderOption) -> "Reader":
        """Build a reader from a prebuilt config, optionally refined by options."""
        return cls(lambda _: config, *options)

    @property
    def config(self) -> ReaderConfig:
        return self._config

    def read_file(self, uri: str) -> bytes:
        """Return the full content addressed by uri.

        Args:
            uri: Local path, embed://<path>, or http(s):// URL

        Raises:
            MalformedURIError: If uri cannot be parsed
            NotFoundError: If a local or bundled path does not exist
            AccessDeniedError: If a local path cannot be read
            UnsupportedSourceError: For embed:// URIs without a bundled filesystem
            RemoteFetchFailedError: If the server answers with a non-2xx status
            TransportError: On network, TLS or proxy failures
        """
        parsed = parse_uri(uri)
        logger.debug("Reading %s as %s", uri, parsed.kind.value)

        if parsed.kind == SourceKind.EMBED:
            return self._read_embedded(parsed)
        if parsed.kind == SourceKind.HTTP:
            return self._http.fetch(parsed.location, scheme=parsed.scheme)
        return self._read_local(parsed)

    def _read_local(self, parsed: ParsedURI) -> bytes:
        try:
            return Path(parsed.location).read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(parsed.uri, "file not found", scheme=parsed.scheme, cause=e) from e
        except OSError as e:
            # PermissionError and other I/O failures on an existing path
            raise AccessDeniedError(parsed.uri, "cannot read file", scheme=parsed.scheme, cause=e) from e

    def _read_embedded(self, parsed: ParsedURI) -> bytes:
        embed_fs = self._config.embed_fs
        if embed_fs is None:
            raise UnsupportedSourceError(
                parsed.uri, "no embedded filesystem configured", scheme=parsed.scheme
            )
        try:
            return embed_fs.read_bytes(parsed.location)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(
                parsed.uri, "embedded file not found", scheme=parsed.scheme, cause=e
            ) from e
        except OSError as e:
            raise AccessDeniedError(
                parsed.uri, "cannot read embedded file", scheme=parsed.scheme, cause=e
            ) from e
