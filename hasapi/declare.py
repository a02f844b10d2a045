"""Declarer-facing operations: create Components and revise their spec.

Nothing in this module writes a Component's status; that belongs to the
reconciler (see :mod:`hasapi.status`).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .models import Component, ComponentSpec, ComponentStatus, WireModel
from .validation import validate_component, validate_component_spec

logger = logging.getLogger(__name__)


def new_component(
    name: str,
    spec: Mapping[str, Any] | ComponentSpec,
    namespace: str = "default",
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
) -> Component:
    """Declare a new Component with an empty status.

    Raises:
        ValidationError: If the name or spec is invalid.
    """
    spec = validate_component_spec(spec)
    document = {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "labels": dict(labels or {}),
            "annotations": dict(annotations or {}),
        },
        "spec": spec.to_wire(),
    }
    return validate_component(document)


def submit(document: Mapping[str, Any] | Component) -> Component:
    """Accept a declared Component document.

    Any status in the document is discarded: declarers never own status.

    Raises:
        ValidationError: Listing every violated constraint.
    """
    component = validate_component(document)
    if not component.status.is_empty():
        logger.debug(f"Discarding declarer-supplied status of component '{component.metadata.name}'")
        component = component.model_copy(update={"status": ComponentStatus()})
    return component


def revise_spec(component: Component, **changes: Any) -> Component:
    """Return a copy of ``component`` with its spec fields replaced.

    ``changes`` are keyed by wire field name (``replicas=2``,
    ``source={"git": {...}}``). The merged spec is validated as a whole and the
    status is carried over untouched.

    Raises:
        ValidationError: If the merged spec is invalid.
    """
    merged = component.spec.to_wire()
    for key, value in changes.items():
        if isinstance(value, WireModel):
            value = value.to_wire()
        elif isinstance(value, (list, tuple)):
            value = [item.to_wire() if hasattr(item, "to_wire") else item for item in value]
        merged[key] = value
    return replace_spec(component, merged)


def replace_spec(component: Component, spec: Mapping[str, Any] | ComponentSpec) -> Component:
    """Return a copy of ``component`` with a wholly new spec.

    Raises:
        ValidationError: If the spec is invalid.
    """
    new_spec = validate_component_spec(spec)
    if new_spec == component.spec:
        return component
    return component.model_copy(update={"spec": new_spec})
