"""Exceptions raised by the file reader."""

from typing import Optional


class FileReaderError(Exception):
    """Base class for all file reader errors."""


class ConfigurationError(FileReaderError):
    """Invalid reader configuration, such as malformed certificate material."""


class ReadFileError(FileReaderError):
    """A single read_file call failed.

    Attributes:
        uri: The URI exactly as passed by the caller
        scheme: Lowercased URI scheme, or "" for plain local paths
        cause: Underlying exception, if any (also chained as __cause__)
    """

    def __init__(
        self,
        uri: str,
        message: str,
        scheme: str = "",
        cause: Optional[BaseException] = None,
    ):
        self.uri = uri
        self.scheme = scheme
        self.cause = cause
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(f"reading {uri!r}: {detail}")


class MalformedURIError(ReadFileError):
    """The URI could not be parsed."""


class NotFoundError(ReadFileError):
    """Local or bundled path does not exist."""


class AccessDeniedError(ReadFileError):
    """Local path exists but cannot be read."""


class UnsupportedSourceError(ReadFileError):
    """The URI addresses a source this reader was not configured for."""


class TransportError(ReadFileError):
    """Network, TLS, or proxy level failure."""


class RemoteFetchFailedError(ReadFileError):
    """Server answered with a non-success status code."""

    def __init__(self, uri: str, status_code: int, scheme: str = ""):
        self.status_code = status_code
        super().__init__(uri, f"unexpected HTTP status {status_code}", scheme=scheme)
