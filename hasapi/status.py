"""Reconciler-facing status operations.

The reconciler is the only writer of a Component's status. Writes go through
:func:`transition_status`, which enforces that the GitOps commit only moves
forward within a lineage, or through :class:`StatusWriter`, which keeps the
lineage for each component the reconciler handles.
"""

from __future__ import annotations

import logging
import threading
from typing import ClassVar

from pydantic import Field

from .exceptions import StatusTransitionError
from .models import (
    Component,
    ComponentSource,
    ComponentSpec,
    ComponentStatus,
    GitOpsStatus,
    WireModel,
)

logger = logging.getLogger(__name__)

_COMMIT_PATH = "status.gitopsRepository.commitID"


class GitOpsInputs(WireModel):
    """The spec fields that affect generated GitOps resources."""

    omit_empty: ClassVar[frozenset[str]] = frozenset(
        {"source", "containerImage", "skipGitOpsResourceGeneration"}
    )

    source: ComponentSource = Field(default_factory=ComponentSource)
    containerImage: str = ""
    skipGitOpsResourceGeneration: bool = False

    @classmethod
    def from_spec(cls, spec: ComponentSpec) -> GitOpsInputs:
        return cls(
            source=spec.source,
            containerImage=spec.containerImage,
            skipGitOpsResourceGeneration=spec.skipGitOpsResourceGeneration,
        )


class CommitLineage(WireModel):
    """Ordered GitOps commits written since the last reset (oldest first)."""

    omit_empty: ClassVar[frozenset[str]] = frozenset({"commits"})

    commits: tuple[str, ...] = ()

    @classmethod
    def from_status(cls, status: ComponentStatus) -> CommitLineage:
        commit = status.gitopsRepository.commitID
        return cls(commits=(commit,) if commit else ())

    @property
    def current(self) -> str:
        return self.commits[-1] if self.commits else ""

    def advance(self, commit: str) -> CommitLineage:
        """Record ``commit`` as the newest commit.

        Re-recording the current commit is a no-op.

        Raises:
            StatusTransitionError: If ``commit`` is empty while a commit is
                recorded, or was already superseded in this lineage.
        """
        if commit == self.current:
            return self
        if not commit:
            raise StatusTransitionError(
                f"cannot clear commitID {self.current!r} without a lineage reset",
                path=_COMMIT_PATH,
            )
        if commit in self.commits:
            raise StatusTransitionError(
                f"commitID {commit!r} is older than the current commit {self.current!r}",
                path=_COMMIT_PATH,
            )
        return CommitLineage(commits=self.commits + (commit,))

    def reset(self, commit: str) -> CommitLineage:
        """Start a new lineage, e.g. after regenerating from scratch."""
        return CommitLineage(commits=(commit,) if commit else ())


def transition_status(
    current: ComponentStatus,
    desired: ComponentStatus,
    lineage: CommitLineage | None = None,
    reset_lineage: bool = False,
    spec: ComponentSpec | None = None,
) -> tuple[ComponentStatus, CommitLineage]:
    """Check that moving from ``current`` to ``desired`` is a legal status write.

    Args:
        current: The status currently recorded.
        desired: The status the reconciler wants to write.
        lineage: Commit history of ``current``. May only be omitted while
            ``current`` records no commit.
        reset_lineage: Treat the write as the start of a new lineage.
        spec: The spec the status is written against. When given, a
            non-empty ``desired`` must mirror its
            ``skipGitOpsResourceGeneration``.

    Returns:
        The accepted status and the updated lineage.

    Raises:
        StatusTransitionError: If the write would move the commit backward,
            ``current`` is older than ``lineage``, or the history of
            ``current`` is unknown.
    """
    head = current.gitopsRepository.commitID
    if lineage is None:
        if head and not reset_lineage:
            raise StatusTransitionError(
                f"commit lineage of commitID {head!r} is unknown; "
                "pass the stored lineage or reset it",
                path=_COMMIT_PATH,
            )
        lineage = CommitLineage()
    elif lineage.current != head:
        if head in lineage.commits:
            message = (
                f"status is stale: commitID {head!r} was superseded by {lineage.current!r}"
            )
        else:
            message = (
                f"commitID {head!r} does not match its lineage "
                f"(current {lineage.current!r})"
            )
        raise StatusTransitionError(message, path=_COMMIT_PATH)

    if spec is not None and not desired.is_empty():
        skipped = desired.gitopsRepository.resourceGenerationSkipped
        if skipped != spec.skipGitOpsResourceGeneration:
            raise StatusTransitionError(
                f"resourceGenerationSkipped {skipped} does not mirror "
                f"skipGitOpsResourceGeneration {spec.skipGitOpsResourceGeneration}",
                path="status.gitopsRepository.resourceGenerationSkipped",
            )

    commit = desired.gitopsRepository.commitID
    if reset_lineage:
        return desired, lineage.reset(commit)
    return desired, lineage.advance(commit)


def needs_gitops_regeneration(
    spec: ComponentSpec,
    status: ComponentStatus,
    observed: GitOpsInputs | None,
) -> bool:
    """Whether the GitOps resources must be regenerated.

    Args:
        spec: The current desired state.
        status: The current recorded status.
        observed: The GitOps inputs captured when ``status`` was last written,
            or None if unknown.

    Returns:
        True if any GitOps-affecting spec field differs from what the last
        status write reflected, or nothing has been recorded yet.
    """
    if observed is None:
        return True
    if spec.skipGitOpsResourceGeneration != status.gitopsRepository.resourceGenerationSkipped:
        return True
    return GitOpsInputs.from_spec(spec) != observed


class StatusWriter:
    """Status writer for one reconciler process.

    Remembers, per component, the commit lineage and the GitOps inputs the
    last write reflected. Safe to share between reconciler threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._lineages: dict[tuple[str, str], CommitLineage] = {}
        self._observed: dict[tuple[str, str], GitOpsInputs] = {}

    def lineage(self, component: Component) -> CommitLineage | None:
        """The lineage last written for ``component``, or None if unknown."""
        with self._lock:
            return self._lineages.get(component.key)

    def adopt(self, component: Component, lineage: CommitLineage) -> None:
        """Take over the persisted ``lineage`` of a component this writer has not seen.

        Raises:
            StatusTransitionError: If ``lineage`` does not end at the commit
                recorded in ``component``'s status.
        """
        head = component.status.gitopsRepository.commitID
        if lineage.current != head:
            raise StatusTransitionError(
                f"lineage ends at {lineage.current!r}, status records {head!r}",
                path=_COMMIT_PATH,
            )
        with self._lock:
            self._lineages[component.key] = lineage

    def observed(self, component: Component) -> GitOpsInputs | None:
        with self._lock:
            return self._observed.get(component.key)

    def needs_regeneration(self, component: Component) -> bool:
        return needs_gitops_regeneration(
            component.spec, component.status, self.observed(component)
        )

    def write(
        self,
        component: Component,
        status: ComponentStatus,
        reset_lineage: bool = False,
    ) -> Component:
        """Return a copy of ``component`` carrying ``status``.

        Raises:
            StatusTransitionError: If the commit would move backward,
                ``component`` is a stale copy, or its lineage is unknown
                (see :meth:`adopt`).
        """
        with self._lock:
            accepted, lineage = transition_status(
                component.status,
                status,
                self._lineages.get(component.key),
                reset_lineage=reset_lineage,
                spec=component.spec,
            )
            self._lineages[component.key] = lineage
            self._observed[component.key] = GitOpsInputs.from_spec(component.spec)
        logger.debug(
            f"Wrote status of component '{component.metadata.name}' "
            f"(commit {accepted.gitopsRepository.commitID or '-'})"
        )
        return component.model_copy(update={"status": accepted})

    def record_generation(
        self,
        component: Component,
        commit_id: str | None = None,
        repository_url: str | None = None,
        branch: str | None = None,
        context: str | None = None,
        reset_lineage: bool = False,
    ) -> Component:
        """Record a completed GitOps generation cycle.

        Fields left as None keep their current value. The status name defaults
        to the spec's component name and ``resourceGenerationSkipped`` mirrors
        the spec at the time of the write.

        Raises:
            StatusTransitionError: If ``commit_id`` would move backward.
        """
        gitops = component.status.gitopsRepository
        updated = GitOpsStatus(
            repositoryURL=gitops.repositoryURL if repository_url is None else repository_url,
            branch=gitops.branch if branch is None else branch,
            context=gitops.context if context is None else context,
            resourceGenerationSkipped=component.spec.skipGitOpsResourceGeneration,
            commitID=gitops.commitID if commit_id is None else commit_id,
        )
        status = ComponentStatus(
            name=component.status.name or component.spec.componentName,
            gitopsRepository=updated,
        )
        return self.write(component, status, reset_lineage=reset_lineage)

    def forget(self, component: Component) -> None:
        """Drop what is remembered about a deleted component."""
        with self._lock:
            self._lineages.pop(component.key, None)
            self._observed.pop(component.key, None)
