"""Read and decode resource manifests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ValidationError, Violation
from ..models import WireModel
from ..scheme import Scheme

logger = logging.getLogger(__name__)


@dataclass
class ManifestResult:
    """Outcome of decoding one YAML document."""

    source: str  # "<path>#<document index>"
    obj: WireModel | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ManifestReader:
    """Decode YAML manifests through a scheme."""

    def __init__(self, scheme: Scheme):
        self._scheme = scheme

    def read_str(self, content: str, source: str = "<string>") -> list[ManifestResult]:
        """Decode every document in a (possibly multi-document) YAML string.

        Empty documents are skipped. A document that fails to decode is
        reported in its result; the remaining documents are still decoded.
        """
        try:
            documents = list(yaml.safe_load_all(content))
        except yaml.YAMLError as e:
            logger.warning(f"Failed to parse YAML from {source}: {e}")
            error = ValidationError(
                [Violation(path="", message=f"invalid YAML: {e}", type="yaml_error")],
                subject=source,
            )
            return [ManifestResult(source=source, error=error)]

        return [
            self._decode(data, f"{source}#{index}")
            for index, data in enumerate(documents)
            if data is not None
        ]

    def read_file(self, path: Path) -> list[ManifestResult]:
        """Decode every document in a YAML file.

        Raises:
            OSError: If the file cannot be read.
        """
        with open(path, encoding="utf-8") as f:
            content = f.read()
        return self.read_str(content, source=str(path))

    def read_one(self, path: Path) -> WireModel:
        """Decode a file holding exactly one document.

        Raises:
            ValidationError: If the file does not hold exactly one valid document.
        """
        results = self.read_file(path)
        if len(results) != 1:
            raise ValidationError(
                [
                    Violation(
                        path="",
                        message=f"expected exactly one document, found {len(results)}",
                    )
                ],
                subject=str(path),
            )
        if results[0].error is not None:
            raise results[0].error
        return results[0].obj

    def _decode(self, data: Any, source: str) -> ManifestResult:
        try:
            return ManifestResult(source=source, obj=self._scheme.decode(data))
        except ValidationError as e:
            return ManifestResult(source=source, error=e)
