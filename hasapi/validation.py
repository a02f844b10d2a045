"""Validation entry points for declared resources."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from .exceptions import ValidationError, Violation
from .models import Component, ComponentSpec

logger = logging.getLogger(__name__)

_PYDANTIC_PREFIXES = ("Value error, ", "Assertion failed, ")


def violations_from(exc: pydantic.ValidationError, prefix: str = "") -> list[Violation]:
    """Convert pydantic errors into violations with dotted wire paths."""
    violations = []
    for error in exc.errors(include_url=False):
        parts = [prefix] if prefix else []
        parts.extend(str(part) for part in error["loc"])
        message = error["msg"]
        for marker in _PYDANTIC_PREFIXES:
            if message.startswith(marker):
                message = message[len(marker):]
        violations.append(
            Violation(path=".".join(parts), message=message, type=error["type"])
        )
    return violations


def validate_component_spec(data: Mapping[str, Any] | ComponentSpec) -> ComponentSpec:
    """Validate a candidate spec.

    Args:
        data: Raw wire-form mapping, or an already constructed spec.

    Returns:
        The accepted, immutable spec.

    Raises:
        ValidationError: Listing every violated constraint.
    """
    if isinstance(data, ComponentSpec):
        return data

    try:
        spec = ComponentSpec.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(violations_from(e, "spec"), subject="ComponentSpec") from e

    if spec.origin is None:
        # Accepted on purpose; later admission stages decide whether this is allowed.
        logger.debug(
            f"Component '{spec.componentName}' declares neither a source nor a container image"
        )
    return spec


def validate_component(data: Mapping[str, Any] | Component) -> Component:
    """Validate a full Component document (metadata, spec and status).

    Raises:
        ValidationError: Listing every violated constraint.
    """
    if isinstance(data, Component):
        data = data.to_wire()

    violations: list[Violation] = []
    component = None
    try:
        component = Component.model_validate(data)
    except pydantic.ValidationError as e:
        violations.extend(violations_from(e))

    metadata = data.get("metadata") if isinstance(data, Mapping) else None
    if not isinstance(metadata, Mapping) or not metadata.get("name"):
        violations.append(
            Violation(path="metadata.name", message="name is required", type="missing")
        )

    if violations:
        raise ValidationError(violations, subject=_describe(data))

    if component.spec.origin is None:
        logger.debug(
            f"Component '{component.metadata.name}' declares neither a source nor a container image"
        )
    return component


def _describe(data: Any) -> str:
    metadata = data.get("metadata") if isinstance(data, Mapping) else None
    name = metadata.get("name") if isinstance(metadata, Mapping) else None
    return f"Component '{name}'" if name else "Component"
