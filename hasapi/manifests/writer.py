"""Write resources as YAML manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import yaml

from ..models import WireModel
from ..scheme import Scheme


class ManifestWriter:
    """Encode resources through a scheme and dump them as YAML."""

    def __init__(self, scheme: Scheme):
        self._scheme = scheme

    def write_str(self, obj: WireModel) -> str:
        """Convert a resource to a YAML string."""
        return yaml.dump(
            self._scheme.encode(obj),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def write_all_str(self, objs: Iterable[WireModel]) -> str:
        """Convert resources to a multi-document YAML string."""
        return yaml.dump_all(
            [self._scheme.encode(obj) for obj in objs],
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    def write_file(self, obj: WireModel, path: Path) -> None:
        """Write a resource to a YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.write_str(obj))
