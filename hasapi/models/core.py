"""Core value types embedded in resources (environment and compute resources)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import ClassVar

from pydantic import Field, field_validator, model_validator

from .base import StringMap, WireModel

ENV_VAR_NAME_PATTERN = r"^[-._a-zA-Z][-._a-zA-Z0-9]*$"

QUANTITY_PATTERN = re.compile(r"^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$")

_BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def parse_quantity(quantity: str) -> Decimal:
    """Parse a quantity string (``500m``, ``1Gi``, ``2e3``) into a Decimal.

    Raises:
        ValueError: If the string is not a valid quantity.
    """
    match = QUANTITY_PATTERN.match(quantity)
    if not match:
        raise ValueError(f"invalid quantity {quantity!r}")
    number, suffix = match.groups()
    try:
        value = Decimal(number)
    except InvalidOperation as e:
        raise ValueError(f"invalid quantity {quantity!r}") from e

    if suffix in _BINARY_SUFFIXES:
        return value * _BINARY_SUFFIXES[suffix]
    if suffix in _DECIMAL_SUFFIXES:
        return value * _DECIMAL_SUFFIXES[suffix]
    if suffix[0] in "eE":
        try:
            return value * Decimal(10) ** int(suffix[1:])
        except ValueError as e:
            raise ValueError(f"invalid quantity {quantity!r}") from e
    raise ValueError(f"invalid quantity {quantity!r}")


class KeySelector(WireModel):
    """Selects a key of a ConfigMap or Secret."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"name", "optional"})

    name: str = ""
    key: str = Field(..., min_length=1)
    optional: bool = False


class ObjectFieldSelector(WireModel):
    """Selects a field of the pod."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"apiVersion"})

    apiVersion: str = ""
    fieldPath: str = Field(..., min_length=1)


class EnvVarSource(WireModel):
    """Source for an environment variable's value. Exactly one must be set."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {"configMapKeyRef", "secretKeyRef", "fieldRef"}
    )

    configMapKeyRef: KeySelector | None = None
    secretKeyRef: KeySelector | None = None
    fieldRef: ObjectFieldSelector | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> EnvVarSource:
        chosen = [name for name in type(self).model_fields if getattr(self, name) is not None]
        if len(chosen) != 1:
            raise ValueError(
                f"exactly one of configMapKeyRef, secretKeyRef, fieldRef must be set, got {len(chosen)}"
            )
        return self


class EnvVar(WireModel):
    """A single environment variable entry."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"value", "valueFrom"})

    name: str = Field(..., min_length=1, pattern=ENV_VAR_NAME_PATTERN)
    value: str = ""
    valueFrom: EnvVarSource | None = None

    @model_validator(mode="after")
    def _value_or_source(self) -> EnvVar:
        if self.value and self.valueFrom is not None:
            raise ValueError(f"env var {self.name!r}: value and valueFrom are mutually exclusive")
        return self


class ResourceRequirements(WireModel):
    """Compute resources (cpu, memory, ...) requested and limited for a component."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"limits", "requests"})

    limits: StringMap = Field(default_factory=dict, validate_default=True, title="Limits")
    requests: StringMap = Field(default_factory=dict, validate_default=True, title="Requests")

    @field_validator("limits", "requests")
    @classmethod
    def _valid_quantities(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        for resource, quantity in value.items():
            try:
                parse_quantity(quantity)
            except ValueError as e:
                raise ValueError(f"{resource}: {e}") from e
        return value

    @model_validator(mode="after")
    def _requests_within_limits(self) -> ResourceRequirements:
        for resource, request in self.requests.items():
            limit = self.limits.get(resource)
            if limit is not None and parse_quantity(request) > parse_quantity(limit):
                raise ValueError(
                    f"{resource}: request {request} must be less than or equal to limit {limit}"
                )
        return self
