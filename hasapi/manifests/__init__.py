"""Reading and writing resource manifests as YAML."""

from .reader import ManifestReader, ManifestResult
from .scanner import ManifestScanner
from .writer import ManifestWriter

__all__ = [
    "ManifestReader",
    "ManifestResult",
    "ManifestScanner",
    "ManifestWriter",
]
