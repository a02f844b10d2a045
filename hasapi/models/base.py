"""Base models shared by all API resources."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, ClassVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)

GROUP = "appstudio.redhat.com"
VERSION = "v1alpha1"
GROUP_VERSION = f"{GROUP}/{VERSION}"

# DNS-1123 label, used for component and application names
DNS_LABEL_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"
DNS_LABEL_MAX_LENGTH = 63

# DNS-1123 subdomain, used for object names
DNS_SUBDOMAIN_PATTERN = (
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)
DNS_SUBDOMAIN_MAX_LENGTH = 253


def _freeze(value: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


# Read-only string map; serialized back to a plain dict
StringMap = Annotated[
    Mapping[str, str],
    AfterValidator(_freeze),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class WireModel(BaseModel):
    """Base class for every model that travels over the wire.

    Fields listed in ``omit_empty`` disappear from the serialized form while
    they hold their zero value (empty string, 0, False, empty collection or a
    nested object whose own fields are all zero). This means an explicit
    ``replicas: 0`` and an unset ``replicas`` serialize identically.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    omit_empty: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _drop_empty(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        fields = type(self).model_fields
        for name in self.omit_empty:
            key = name
            if info.by_alias and fields[name].alias:
                key = fields[name].alias
            if key not in data:
                continue
            value = getattr(self, name)
            if isinstance(value, WireModel):
                empty = value.is_zero()
            else:
                empty = not data[key]
            if empty:
                del data[key]
        return data

    def is_zero(self) -> bool:
        """True if every field holds its zero value."""
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, WireModel):
                if not value.is_zero():
                    return False
            elif value:
                return False
        return True

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible wire form."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]):
        """Deserialize from the wire form."""
        return cls.model_validate(data)

    def fingerprint(self) -> str:
        """Stable SHA-256 digest of the wire form.

        Mapping keys are sorted so construction order does not matter; list
        order is kept since it is significant (e.g. ``env``).
        """
        canonical = json.dumps(self.to_wire(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __hash__(self) -> int:
        return hash(self.fingerprint())

    def diff(self, other: WireModel) -> list[str]:
        """Return the top-level wire field names whose values differ."""
        mine = self.to_wire()
        theirs = other.to_wire()
        return [key for key in _ordered_keys(mine, theirs) if mine.get(key) != theirs.get(key)]


def _ordered_keys(first: dict[str, Any], second: dict[str, Any]) -> list[str]:
    keys = list(first)
    keys.extend(key for key in second if key not in first)
    return keys


class ObjectMeta(WireModel):
    """Metadata every persisted resource carries."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {
            "name",
            "namespace",
            "uid",
            "resourceVersion",
            "generation",
            "labels",
            "annotations",
        }
    )

    name: str = Field(
        default="",
        max_length=DNS_SUBDOMAIN_MAX_LENGTH,
        pattern=f"(^$)|({DNS_SUBDOMAIN_PATTERN})",
        title="Name",
        description="Unique name within the namespace",
    )
    namespace: str = Field(default="", title="Namespace")
    uid: str = Field(default="", title="UID")
    resourceVersion: str = Field(
        default="",
        title="Resource Version",
        description="Opaque version used for optimistic concurrency",
    )
    generation: int = Field(
        default=0,
        ge=0,
        title="Generation",
        description="Incremented whenever the desired state changes",
    )
    labels: StringMap = Field(default_factory=dict, validate_default=True, title="Labels")
    annotations: StringMap = Field(
        default_factory=dict, validate_default=True, title="Annotations"
    )


class ListMeta(WireModel):
    """Metadata for list responses.

    ``continue`` is an opaque token handed back by the server; clients pass it
    back unchanged to fetch the next page.
    """

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {"resourceVersion", "continue_", "remainingItemCount"}
    )

    resourceVersion: str = ""
    continue_: str = Field(default="", alias="continue")
    remainingItemCount: int | None = None


class Resource(WireModel):
    """Base class for top-level API resources."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"metadata"})

    apiVersion: str = GROUP_VERSION
    kind: str
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def key(self) -> tuple[str, str]:
        """(namespace, name) identifying the resource."""
        return (self.metadata.namespace, self.metadata.name)

    def deep_copy(self):
        """Return a fully independent copy."""
        return self.from_wire(self.to_wire())
