"""Trusted root certificate parsing and TLS context construction."""

import logging
import re
import ssl
from pathlib import Path
from typing import Iterable, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CertificateData = Union[bytes, str]

_PEM_BLOCK = re.compile(
    rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----", re.DOTALL
)


def load_certificates(cert: CertificateData) -> list[bytes]:
    """Decode certificate material into a list of DER certificates.

    Accepts PEM text (str or bytes, possibly several certificates) or a
    single DER-encoded certificate. Each certificate is loaded into a
    scratch SSL context so garbage is rejected here rather than on first use.

    Raises:
        ConfigurationError: If the material is empty or not a valid certificate
    """
    if isinstance(cert, str):
        try:
            cert = cert.encode("ascii")
        except UnicodeEncodeError as e:
            raise ConfigurationError(f"PEM certificate is not ASCII: {e}") from e

    if not cert:
        raise ConfigurationError("empty certificate data")

    if b"-----BEGIN" in cert:
        blocks = _PEM_BLOCK.findall(cert)
        if not blocks:
            raise ConfigurationError("no PEM CERTIFICATE block found")
        ders = []
        for block in blocks:
            try:
                ders.append(ssl.PEM_cert_to_DER_cert(block.decode("ascii")))
            except ValueError as e:
                raise ConfigurationError(f"malformed PEM certificate: {e}") from e
    else:
        ders = [bytes(cert)]

    for der in ders:
        _check_loadable(der)
    return ders


def load_certificate_file(path: Union[str, Path]) -> list[bytes]:
    """Read a PEM bundle or DER certificate from disk.

    Raises:
        ConfigurationError: If the file cannot be read or holds no valid certificate
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"reading CA file {path}: {e}") from e
    logger.debug("Loaded CA file %s (%d bytes)", path, len(data))
    return load_certificates(data)


def _check_loadable(der: bytes) -> None:
    scratch = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        scratch.load_verify_locations(cadata=der)
    except (ssl.SSLError, ValueError) as e:
        raise ConfigurationError(f"invalid certificate: {e}") from e


def build_ssl_context(trusted_roots: Iterable[bytes] = ()) -> ssl.SSLContext:
    """Create a client TLS context trusting the platform roots plus extras.

    Extra roots are added on top of the platform store, never instead of it.
    """
    context = ssl.create_default_context()
    count = 0
    for der in trusted_roots:
        context.load_verify_locations(cadata=der)
        count += 1
    if count:
        logger.debug("Added %d trusted root certificate(s) to TLS context", count)
    return context
