"""In-memory bundled filesystem."""

from typing import Iterator

from .protocol import is_valid_path, not_found


class InMemoryFS:
    """Dict-backed EmbeddedFS.

    Useful when content is generated at startup or in tests, where shipping
    real package data would be overkill.

    Example:
        fs = InMemoryFS({
            "manifests/cluster.yaml": "kind: Cluster\\n",
            "images/logo.png": b"\\x89PNG...",
        })
        reader = Reader(with_embed_fs(fs))
        reader.read_file("embed:///manifests/cluster.yaml")
    """

    def __init__(self, files: dict[str, str | bytes] | None = None):
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def add_file(self, path: str, content: str | bytes) -> None:
        """Add or replace a file.

        Args:
            path: Slash-separated path relative to the root
            content: File content; str is stored UTF-8 encoded

        Raises:
            ValueError: If path is not a valid relative slash path
        """
        if not is_valid_path(path) or path == ".":
            raise ValueError(f"Invalid embedded path: {path!r}")
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[path] = content

    def remove_file(self, path: str) -> None:
        self._files.pop(path, None)

    def file_exists(self, path: str) -> bool:
        return is_valid_path(path) and path in self._files

    def walk_files(self, root: str = "") -> Iterator[str]:
        """Iterate over stored paths, optionally limited to a subdirectory."""
        prefix = root.strip("/")
        for path in sorted(self._files):
            if prefix and not path.startswith(prefix + "/") and path != prefix:
                continue
            yield path

    def read_bytes(self, path: str) -> bytes:
        if not is_valid_path(path):
            raise not_found(path)
        content = self._files.get(path)
        if content is None:
            raise not_found(path)
        return content
