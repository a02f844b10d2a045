"""Pydantic models for the appstudio API resources."""

from .base import (
    DNS_LABEL_MAX_LENGTH,
    DNS_LABEL_PATTERN,
    GROUP,
    GROUP_VERSION,
    VERSION,
    ListMeta,
    ObjectMeta,
    Resource,
    WireModel,
)
from .component import (
    Component,
    ComponentList,
    ComponentSource,
    ComponentSpec,
    ComponentStatus,
    GitOpsStatus,
    GitSource,
    SourceKind,
)
from .core import (
    EnvVar,
    EnvVarSource,
    KeySelector,
    ObjectFieldSelector,
    ResourceRequirements,
    parse_quantity,
)

__all__ = [
    "DNS_LABEL_MAX_LENGTH",
    "DNS_LABEL_PATTERN",
    "GROUP",
    "GROUP_VERSION",
    "VERSION",
    "ListMeta",
    "ObjectMeta",
    "Resource",
    "WireModel",
    "Component",
    "ComponentList",
    "ComponentSource",
    "ComponentSpec",
    "ComponentStatus",
    "GitOpsStatus",
    "GitSource",
    "SourceKind",
    "EnvVar",
    "EnvVarSource",
    "KeySelector",
    "ObjectFieldSelector",
    "ResourceRequirements",
    "parse_quantity",
]
