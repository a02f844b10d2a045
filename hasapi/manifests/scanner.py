"""Find manifest files on disk."""

from pathlib import Path
from typing import Iterator


class ManifestScanner:
    """Collect YAML manifest files from files and directory trees."""

    SUFFIXES = {".yaml", ".yml"}

    # Directories never descended into
    SKIP_DIRS = {".git", "node_modules", "__pycache__"}

    def scan(self, *paths: str | Path) -> Iterator[Path]:
        """Yield manifest files under ``paths`` in a stable order.

        Files given explicitly are yielded whatever their suffix; directories
        are searched recursively for ``.yaml``/``.yml`` files.
        """
        for root in paths:
            root = Path(root)
            if root.is_file():
                yield root
                continue
            if not root.is_dir():
                continue
            for path in sorted(root.rglob("*")):
                if any(part in self.SKIP_DIRS for part in path.relative_to(root).parts):
                    continue
                if path.is_file() and path.suffix in self.SUFFIXES:
                    yield path
