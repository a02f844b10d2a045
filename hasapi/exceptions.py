"""Exceptions raised by hasapi."""

from __future__ import annotations

from dataclasses import dataclass


class HasApiError(Exception):
    """Base class for all hasapi exceptions."""


## Validation ##################################################################


@dataclass(frozen=True)
class Violation:
    """A single violated constraint."""

    path: str  # dotted wire path, e.g. "spec.source.git.url"
    message: str
    type: str = "value_error"

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ValidationError(HasApiError, ValueError):
    """One or more structural or constraint violations.

    Carries every violation found, not just the first, so a declarer sees all
    problems in one round trip.
    """

    def __init__(self, violations: list[Violation], subject: str = ""):
        self.violations = list(violations)
        self.subject = subject
        prefix = f"{subject} is invalid" if subject else "validation failed"
        lines = "\n".join(f"  - {v}" for v in self.violations)
        super().__init__(f"{prefix} ({len(self.violations)} violation(s)):\n{lines}")

    @property
    def paths(self) -> list[str]:
        return [v.path for v in self.violations]


class StatusTransitionError(ValidationError):
    """A status write that breaks the status transition contract."""

    def __init__(self, message: str, path: str = "status"):
        super().__init__([Violation(path=path, message=message, type="status_transition")])


class UnknownKindError(ValidationError):
    """A document whose apiVersion/kind is not registered in the scheme."""

    def __init__(self, api_version: str | None, kind: str | None):
        self.api_version = api_version
        self.kind = kind
        super().__init__(
            [
                Violation(
                    path="kind",
                    message=f"no kind {kind!r} is registered for version {api_version!r}",
                    type="unknown_kind",
                )
            ]
        )


## Store #######################################################################


class StoreError(HasApiError):
    """Base class for errors raised by the component store."""


class ConflictError(StoreError):
    """Concurrent write collision. Re-read the resource and retry."""

    def __init__(self, key: tuple[str, str], expected: str, actual: str):
        self.key = key
        self.expected = expected
        self.actual = actual
        namespace, name = key
        super().__init__(
            f"Operation cannot be fulfilled on component {namespace}/{name}: "
            f"resourceVersion {expected!r} is stale (current {actual!r})"
        )


class NotFoundError(StoreError):
    """The requested resource does not exist."""

    def __init__(self, key: tuple[str, str]):
        self.key = key
        super().__init__(f"component {key[0]}/{key[1]} not found")


class AlreadyExistsError(StoreError):
    """A resource with the same namespace and name already exists."""

    def __init__(self, key: tuple[str, str]):
        self.key = key
        super().__init__(f"component {key[0]}/{key[1]} already exists")
