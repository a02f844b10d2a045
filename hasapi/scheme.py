"""Registry of resource kinds.

A :class:`Scheme` is built once at process start (see :func:`build_scheme`)
and handed to whatever decodes or encodes resources.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

import pydantic

from .exceptions import UnknownKindError, ValidationError, Violation
from .models import Component, ComponentList, WireModel
from .validation import validate_component, violations_from

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceInfo:
    """Naming information for a registered kind."""

    api_version: str
    kind: str
    model: type[WireModel]
    plural: str = ""
    short_names: tuple[str, ...] = field(default_factory=tuple)
    list_kind: str = ""
    validator: Callable[[dict[str, Any]], WireModel] | None = None

    @property
    def names(self) -> set[str]:
        """All names the resource answers to (case-insensitive)."""
        names = {self.kind.lower(), *(name.lower() for name in self.short_names)}
        if self.plural:
            names.add(self.plural.lower())
        return names


class Scheme:
    """Maps (apiVersion, kind) to the model class that represents it."""

    def __init__(self):
        self._types: dict[tuple[str, str], ResourceInfo] = {}

    def register(
        self,
        model: type[WireModel],
        plural: str = "",
        short_names: tuple[str, ...] = (),
        list_kind: str = "",
        validator: Callable[[dict[str, Any]], WireModel] | None = None,
    ) -> ResourceInfo:
        """Register a model.

        Its apiVersion and kind come from the model's field defaults. A
        ``validator`` replaces plain model validation when decoding; it must
        raise :class:`ValidationError` itself.
        """
        api_version = model.model_fields["apiVersion"].default
        kind = model.model_fields["kind"].default
        key = (api_version, kind)
        if key in self._types:
            raise ValueError(f"kind {kind!r} is already registered for {api_version!r}")

        info = ResourceInfo(
            api_version=api_version,
            kind=kind,
            model=model,
            plural=plural,
            short_names=tuple(short_names),
            list_kind=list_kind,
            validator=validator,
        )
        self._types[key] = info
        logger.debug(f"Registered {api_version}, Kind={kind}")
        return info

    def recognizes(self, api_version: str, kind: str) -> bool:
        return (api_version, kind) in self._types

    def info_for(self, api_version: str, kind: str) -> ResourceInfo:
        info = self._types.get((api_version, kind))
        if info is None:
            raise UnknownKindError(api_version, kind)
        return info

    def model_for(self, api_version: str, kind: str) -> type[WireModel]:
        return self.info_for(api_version, kind).model

    def resource_for(self, name: str) -> ResourceInfo:
        """Resolve a kind, plural or short name (``hc``, ``components``)."""
        wanted = name.lower()
        for info in self._types.values():
            if wanted in info.names:
                return info
        raise UnknownKindError(None, name)

    def known_kinds(self) -> list[str]:
        return sorted(kind for _, kind in self._types)

    def decode(self, data: dict[str, Any]) -> WireModel:
        """Validate a wire-form document into its registered model.

        Raises:
            UnknownKindError: If apiVersion/kind is not registered.
            ValidationError: If the document is invalid.
        """
        if not isinstance(data, dict):
            raise ValidationError(
                [
                    Violation(
                        path="",
                        message=f"expected a mapping, got {type(data).__name__}",
                        type="model_type",
                    )
                ]
            )
        info = self.info_for(data.get("apiVersion"), data.get("kind"))
        if info.validator is not None:
            return info.validator(data)
        try:
            return info.model.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(violations_from(e), subject=data.get("kind", "")) from e

    def encode(self, obj: WireModel) -> dict[str, Any]:
        """Serialize a registered object to its wire form."""
        self.model_for(getattr(obj, "apiVersion", None), getattr(obj, "kind", None))
        return obj.to_wire()


def build_scheme() -> Scheme:
    """Build the scheme holding every kind this package defines."""
    scheme = Scheme()
    scheme.register(
        Component,
        plural="components",
        short_names=("hascmp", "hc", "comp"),
        list_kind="ComponentList",
        validator=validate_component,
    )
    scheme.register(ComponentList)
    return scheme
