"""Protocol for bundled, read-only filesystems addressed by embed:// URIs."""

import errno
import os
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddedFS(Protocol):
    """Read-only filesystem shipped alongside the application.

    Paths are slash-separated and relative to the filesystem root, without
    a leading slash. Implementations must not allow access outside the root.
    """

    def read_bytes(self, path: str) -> bytes:
        """Return the full content of the file at path.

        Raises:
            FileNotFoundError: If path is invalid, missing, or not a regular file
        """
        ...


def is_valid_path(path: str) -> bool:
    """Check that path is a clean, rooted-relative slash path.

    "." names the root itself. Otherwise the path must be non-empty, use
    "/" as separator, and contain no empty, "." or ".." elements.
    """
    if path == ".":
        return True
    if not path or "\\" in path:
        return False
    return all(part not in ("", ".", "..") for part in path.split("/"))


def not_found(path: str) -> FileNotFoundError:
    """Build a FileNotFoundError carrying errno and filename like open() does."""
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
