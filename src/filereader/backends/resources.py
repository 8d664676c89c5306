"""Bundled filesystem backed by package data."""

from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from .protocol import is_valid_path, not_found


class ResourceFS:
    """EmbeddedFS over an importlib.resources Traversable or a directory.

    Package data is the Python counterpart of files compiled into a binary:
    it travels with the installed distribution, including inside wheels and
    zip archives.
    """

    def __init__(self, root: Traversable | str | Path):
        if isinstance(root, str):
            root = Path(root)
        self._root = root

    @classmethod
    def for_package(cls, package: str) -> "ResourceFS":
        """Wrap the data files shipped inside an importable package."""
        return cls(resources.files(package))

    def read_bytes(self, path: str) -> bytes:
        if not is_valid_path(path):
            raise not_found(path)

        node = self._root
        if path != ".":
            for part in path.split("/"):
                node = node.joinpath(part)

        if isinstance(self._root, Path) and not self._within_root(node):
            raise not_found(path)
        if not node.is_file():
            raise not_found(path)
        return node.read_bytes()

    def _within_root(self, node: Path) -> bool:
        """Check symlink targets stay inside a directory root."""
        try:
            node.resolve().relative_to(self._root.resolve())
        except (OSError, ValueError):
            return False
        return True
