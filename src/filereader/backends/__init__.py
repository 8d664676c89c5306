"""Bundled filesystem backends for embed:// URIs.

- ResourceFS: package data via importlib.resources, or a directory
- InMemoryFS: dict-backed, for generated content and tests
"""

from .protocol import EmbeddedFS, is_valid_path
from .memory import InMemoryFS
from .resources import ResourceFS

__all__ = ["EmbeddedFS", "InMemoryFS", "ResourceFS", "is_valid_path"]
