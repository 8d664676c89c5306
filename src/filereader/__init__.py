"""filereader - read bytes from local paths, bundled files, or HTTP(S) URLs."""

__version__ = "0.1.0"

from .backends import EmbeddedFS, InMemoryFS, ResourceFS
from .config import (
    ReaderConfig,
    ReaderOption,
    with_embed_fs,
    with_non_cached_proxy_config,
    with_root_ca_certs,
    with_root_ca_file,
)
from .errors import (
    AccessDeniedError,
    ConfigurationError,
    FileReaderError,
    MalformedURIError,
    NotFoundError,
    ReadFileError,
    RemoteFetchFailedError,
    TransportError,
    UnsupportedSourceError,
)
from .proxy import ProxyPolicy
from .reader import Reader

__all__ = [
    "Reader",
    "ReaderConfig",
    "ReaderOption",
    "ProxyPolicy",
    "with_embed_fs",
    "with_root_ca_certs",
    "with_root_ca_file",
    "with_non_cached_proxy_config",
    "EmbeddedFS",
    "InMemoryFS",
    "ResourceFS",
    "FileReaderError",
    "ConfigurationError",
    "ReadFileError",
    "MalformedURIError",
    "NotFoundError",
    "AccessDeniedError",
    "UnsupportedSourceError",
    "RemoteFetchFailedError",
    "TransportError",
]
