"""Component resource model."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Literal

from pydantic import Field, model_validator

from .base import (
    DNS_LABEL_MAX_LENGTH,
    DNS_LABEL_PATTERN,
    GROUP_VERSION,
    ListMeta,
    Resource,
    WireModel,
)
from .core import EnvVar, ResourceRequirements


class SourceKind(str, Enum):
    """Origin of a component's source."""

    GIT = "Git"
    IMAGE = "Image"


class GitSource(WireModel):
    """Git repository a component is built from."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {"revision", "context", "devfileUrl", "dockerfileUrl"}
    )

    url: str = Field(
        ..., min_length=1, title="URL", description="Repository to create the component from"
    )
    revision: str = Field(
        default="",
        title="Revision",
        description="Branch, tag or commit id. The repository's default branch if empty.",
    )
    context: str = Field(
        default="",
        title="Context",
        description="Relative path inside the repository containing the component",
    )
    devfileUrl: str = Field(default="", title="Devfile URL")
    dockerfileUrl: str = Field(default="", title="Dockerfile URL")


class ComponentSource(WireModel):
    """Union of the supported source origins.

    Every field declared on this model (or a subclass) is one alternative of
    the union, serialized under its own name. At most one may be set.
    """

    omit_empty: ClassVar[frozenset[str]] = frozenset({"git"})

    # alternative field name -> origin it stands for
    alternatives: ClassVar[dict[str, SourceKind]] = {"git": SourceKind.GIT}

    git: GitSource | None = Field(default=None, title="Git Source")

    @model_validator(mode="after")
    def _at_most_one(self) -> ComponentSource:
        populated = self.populated()
        if len(populated) > 1:
            raise ValueError(
                f"at most one source may be set, got {', '.join(populated)}"
            )
        return self

    def populated(self) -> list[str]:
        """Names of the alternatives that are set."""
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    @property
    def kind(self) -> SourceKind | None:
        """Origin of the populated alternative, or None if the union is empty."""
        populated = self.populated()
        if not populated:
            return None
        return self.alternatives[populated[0]]

    @property
    def value(self) -> WireModel | None:
        """The populated alternative, if any."""
        populated = self.populated()
        return getattr(self, populated[0]) if populated else None

    def is_empty(self) -> bool:
        return not self.populated()


class ComponentSpec(WireModel):
    """Desired state of a Component."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {
            "secret",
            "source",
            "resources",
            "replicas",
            "targetPort",
            "route",
            "env",
            "containerImage",
            "skipGitOpsResourceGeneration",
        }
    )

    componentName: str = Field(
        ...,
        min_length=1,
        max_length=DNS_LABEL_MAX_LENGTH,
        pattern=DNS_LABEL_PATTERN,
        title="Component Name",
        description="Name of the component to be added to the application",
    )
    application: str = Field(
        ...,
        min_length=1,
        max_length=DNS_LABEL_MAX_LENGTH,
        pattern=DNS_LABEL_PATTERN,
        title="Application",
        description="Application to add the component to",
    )
    secret: str = Field(
        default="",
        title="Secret",
        description="Access token secret for Git sources, pull secret for Image sources",
    )
    source: ComponentSource = Field(default_factory=ComponentSource, title="Source")
    resources: ResourceRequirements = Field(
        default_factory=ResourceRequirements, title="Resources"
    )
    replicas: int = Field(default=0, ge=0, title="Replicas")
    targetPort: int = Field(default=0, ge=0, le=65535, title="Target Port")
    route: str = Field(default="", title="Route")
    env: tuple[EnvVar, ...] = Field(default=(), title="Environment")
    containerImage: str = Field(
        default="",
        title="Container Image",
        description="Image to create the component from, or the build output for Git sources",
    )
    skipGitOpsResourceGeneration: bool = Field(
        default=False, title="Skip GitOps Resource Generation"
    )

    @property
    def origin(self) -> SourceKind | None:
        """Effective source origin.

        A populated source wins. Without one the component is image-origin if
        it names a container image; otherwise the origin is unknown.
        """
        if self.source.kind is not None:
            return self.source.kind
        if self.containerImage:
            return SourceKind.IMAGE
        return None

    @property
    def source_image(self) -> str | None:
        """Image the component is created from (image-origin only)."""
        if self.origin is SourceKind.IMAGE:
            return self.containerImage
        return None

    @property
    def build_output_image(self) -> str | None:
        """Image a Git-origin component's build is pushed to."""
        if self.origin is SourceKind.GIT and self.containerImage:
            return self.containerImage
        return None


class GitOpsStatus(WireModel):
    """Where the component's generated GitOps resources live."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {"repositoryURL", "branch", "context", "resourceGenerationSkipped", "commitID"}
    )

    repositoryURL: str = ""
    branch: str = ""
    context: str = ""
    resourceGenerationSkipped: bool = False
    commitID: str = Field(
        default="", description="Most recent commit ID pushed for this component"
    )


class ComponentStatus(WireModel):
    """Observed state of a Component. Written by the reconciler only."""

    name: str = ""
    gitopsRepository: GitOpsStatus = Field(default_factory=GitOpsStatus)

    def is_empty(self) -> bool:
        return self.is_zero()


class Component(Resource):
    """A buildable, deployable unit of an application.

    Example:
        apiVersion: appstudio.redhat.com/v1alpha1
        kind: Component
        metadata:
          name: my-app
        spec:
          componentName: my-app
          application: my-app-group
          source:
            git:
              url: https://example.com/repo.git
    """

    omit_empty: ClassVar[frozenset[str]] = frozenset({"metadata", "status"})

    apiVersion: Literal["appstudio.redhat.com/v1alpha1"] = GROUP_VERSION
    kind: Literal["Component"] = "Component"
    spec: ComponentSpec
    status: ComponentStatus = Field(default_factory=ComponentStatus)


class ComponentList(WireModel):
    """An ordered page of Components."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"metadata"})

    apiVersion: Literal["appstudio.redhat.com/v1alpha1"] = GROUP_VERSION
    kind: Literal["ComponentList"] = "ComponentList"
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: tuple[Component, ...] = ()

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def continue_token(self) -> str:
        return self.metadata.continue_
