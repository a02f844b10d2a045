"""Component resource model for the appstudio.redhat.com/v1alpha1 API."""

from .declare import new_component, replace_spec, revise_spec, submit
from .exceptions import (
    AlreadyExistsError,
    ConflictError,
    HasApiError,
    NotFoundError,
    StatusTransitionError,
    StoreError,
    UnknownKindError,
    ValidationError,
    Violation,
)
from .models import (
    Component,
    ComponentList,
    ComponentSource,
    ComponentSpec,
    ComponentStatus,
    GitOpsStatus,
    GitSource,
    SourceKind,
)
from .scheme import Scheme, build_scheme
from .status import (
    CommitLineage,
    GitOpsInputs,
    StatusWriter,
    needs_gitops_regeneration,
    transition_status,
)
from .validation import validate_component, validate_component_spec

__all__ = [
    "new_component",
    "replace_spec",
    "revise_spec",
    "submit",
    "AlreadyExistsError",
    "ConflictError",
    "HasApiError",
    "NotFoundError",
    "StatusTransitionError",
    "StoreError",
    "UnknownKindError",
    "ValidationError",
    "Violation",
    "Component",
    "ComponentList",
    "ComponentSource",
    "ComponentSpec",
    "ComponentStatus",
    "GitOpsStatus",
    "GitSource",
    "SourceKind",
    "Scheme",
    "build_scheme",
    "CommitLineage",
    "GitOpsInputs",
    "StatusWriter",
    "needs_gitops_regeneration",
    "transition_status",
    "validate_component",
    "validate_component_spec",
]
