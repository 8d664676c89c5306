"""Reader configuration and the options that build it."""

import os
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .backends import EmbeddedFS
from .certs import CertificateData, load_certificate_file, load_certificates
from .errors import ConfigurationError
from .proxy import ProxyPolicy

_TRUTHY = {"1", "true", "yes", "on"}


class ReaderConfig(BaseModel):
    """Immutable reader configuration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Bundled filesystem for embed:// URIs; None disables them
    embed_fs: Optional[Any] = Field(default=None)
    # DER certificates trusted in addition to the platform store
    trusted_roots: tuple[bytes, ...] = Field(default=())
    proxy_policy: ProxyPolicy = Field(default=ProxyPolicy.CACHED)

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """Load configuration from environment variables.

        Environment Variables:
            FILEREADER_ROOT_CA_FILE: PEM bundle of extra trusted root certificates
            FILEREADER_NON_CACHED_PROXY: "true" to re-read proxy variables per request
        """
        load_dotenv()

        options: list[ReaderOption] = []
        ca_file = os.getenv("FILEREADER_ROOT_CA_FILE")
        if ca_file:
            options.append(with_root_ca_file(ca_file))
        if os.getenv("FILEREADER_NON_CACHED_PROXY", "").strip().lower() in _TRUTHY:
            options.append(with_non_cached_proxy_config())

        return apply_options(cls(), options)


ReaderOption = Callable[[ReaderConfig], ReaderConfig]


def apply_options(config: ReaderConfig, options: Iterable[ReaderOption]) -> ReaderConfig:
    """Apply options in order, each one receiving the previous result."""
    for option in options:
        config = option(config)
    return config


def with_embed_fs(fs: EmbeddedFS) -> ReaderOption:
    """Resolve embed:// URIs against fs."""
    if not isinstance(fs, EmbeddedFS):
        raise ConfigurationError(
            f"embedded filesystem must provide read_bytes(path), got {type(fs).__name__}"
        )

    def apply(config: ReaderConfig) -> ReaderConfig:
        return config.model_copy(update={"embed_fs": fs})

    return apply


def with_root_ca_certs(certs: Iterable[CertificateData]) -> ReaderOption:
    """Trust these root certificates on top of the platform store.

    Certificates are decoded immediately; malformed material raises
    ConfigurationError before any reader exists.
    """
    decoded: list[bytes] = []
    for cert in certs:
        decoded.extend(load_certificates(cert))

    def apply(config: ReaderConfig) -> ReaderConfig:
        return config.model_copy(update={"trusted_roots": config.trusted_roots + tuple(decoded)})

    return apply


def with_root_ca_file(path: Union[str, Path]) -> ReaderOption:
    """Trust every certificate in a PEM bundle (or a single DER file)."""
    decoded = load_certificate_file(path)

    def apply(config: ReaderConfig) -> ReaderConfig:
        return config.model_copy(update={"trusted_roots": config.trusted_roots + tuple(decoded)})

    return apply


def with_non_cached_proxy_config() -> ReaderOption:
    """Re-read proxy environment variables for every request."""

    def apply(config: ReaderConfig) -> ReaderConfig:
        return config.model_copy(update={"proxy_policy": ProxyPolicy.PER_REQUEST})

    return apply
