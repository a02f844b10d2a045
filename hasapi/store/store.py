"""Component storage with optimistic concurrency."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import threading
import uuid
from typing import Any

import duckdb

from ..config import HasApiConfig
from ..declare import submit
from ..exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ValidationError,
    Violation,
)
from ..models import Component, ComponentList, ListMeta, ObjectMeta
from ..status import CommitLineage, transition_status
from .schema import create_schema, get_connection

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


class ComponentStore:
    """Stores Components and guards writes with resource versions.

    Every write must carry the ``metadata.resourceVersion`` the caller last
    read. A stale version raises :class:`ConflictError`; the caller re-reads
    and retries. Spec writes (:meth:`update`) never touch status and status
    writes (:meth:`update_status`) never touch spec.
    """

    def __init__(
        self,
        conn: duckdb.DuckDBPyConnection,
        default_namespace: str = DEFAULT_NAMESPACE,
        page_size: int = 500,
    ):
        self.conn = conn
        self.default_namespace = default_namespace
        self.page_size = page_size
        # One DuckDB connection is not safe to share between threads
        self._lock = threading.Lock()
        create_schema(self.conn)

    @classmethod
    def from_config(cls, config: HasApiConfig) -> ComponentStore:
        """Open the store described by ``config.settings``."""
        settings = config.settings
        return cls(
            get_connection(settings.database),
            default_namespace=settings.default_namespace,
            page_size=settings.list_page_size,
        )

    ## Reads ###################################################################

    def get(self, name: str, namespace: str | None = None) -> Component:
        """Fetch a component.

        Raises:
            NotFoundError: If it does not exist.
        """
        key = (namespace or self.default_namespace, name)
        with self._lock:
            row = self._fetch_row(key)
        if row is None:
            raise NotFoundError(key)
        return self._to_component(row)

    def lineage(self, name: str, namespace: str | None = None) -> CommitLineage:
        """The GitOps commits written for a component since its last lineage reset.

        Raises:
            NotFoundError: If it does not exist.
        """
        key = (namespace or self.default_namespace, name)
        with self._lock:
            lineage = self._fetch_lineage(key)
        if lineage is None:
            raise NotFoundError(key)
        return lineage

    def list(
        self,
        namespace: str | None = None,
        application: str | None = None,
        limit: int | None = None,
        continue_token: str = "",
    ) -> ComponentList:
        """List components ordered by namespace and name.

        Args:
            namespace: Only this namespace; all namespaces if None.
            application: Only components of this application.
            limit: Page size; the store's default page size if None.
            continue_token: ``metadata.continue`` of the previous page.

        Raises:
            ValidationError: If the continue token is malformed
                or ``limit`` is negative.
        """
        if limit is not None and limit < 0:
            raise ValidationError(
                [Violation(path="limit", message=f"limit must not be negative, got {limit}")]
            )
        limit = limit or self.page_size
        where = []
        params: list[Any] = []
        if namespace is not None:
            where.append("namespace = ?")
            params.append(namespace)
        if application is not None:
            where.append("application = ?")
            params.append(application)
        if continue_token:
            after_namespace, after_name = _decode_continue(continue_token)
            where.append("(namespace > ? OR (namespace = ? AND name > ?))")
            params.extend([after_namespace, after_namespace, after_name])

        sql = "SELECT document FROM components"
        count_sql = "SELECT count(*) FROM components"
        if where:
            clause = " WHERE " + " AND ".join(where)
            sql += clause
            count_sql += clause
        sql += " ORDER BY namespace, name LIMIT ?"

        with self._lock:
            rows = self.conn.execute(sql, params + [limit]).fetchall()
            total = self.conn.execute(count_sql, params).fetchone()[0]
            version = self.conn.execute(
                "SELECT coalesce(max(resource_version), 0) FROM components"
            ).fetchone()[0]

        items = [self._to_component(row) for row in rows]
        remaining = total - len(items)
        token = ""
        if remaining > 0 and items:
            token = _encode_continue(items[-1].key)

        return ComponentList(
            metadata=ListMeta(
                resourceVersion=str(version),
                continue_=token,
                remainingItemCount=remaining if remaining > 0 else None,
            ),
            items=items,
        )

    ## Writes ##################################################################

    def create(self, component: Component) -> Component:
        """Store a new component.

        The store assigns uid, resourceVersion and generation 1. A status
        in the submitted document is discarded.

        Raises:
            ValidationError: If the component is invalid.
            AlreadyExistsError: If the namespace/name is taken.
        """
        component = submit(component)
        namespace = component.metadata.namespace or self.default_namespace
        key = (namespace, component.metadata.name)

        with self._lock:
            if self._fetch_row(key) is not None:
                raise AlreadyExistsError(key)
            version = self._next_version()
            metadata = _with_meta(
                component.metadata,
                namespace=namespace,
                uid=str(uuid.uuid4()),
                resourceVersion=str(version),
                generation=1,
            )
            stored = component.model_copy(update={"metadata": metadata})
            self.conn.execute(
                """
                INSERT INTO components
                    (namespace, name, uid, application, resource_version, generation, document,
                     commit_lineage)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    namespace,
                    metadata.name,
                    metadata.uid,
                    stored.spec.application,
                    version,
                    1,
                    json.dumps(stored.to_wire()),
                    json.dumps([]),
                ],
            )

        logger.info(f"Created component {namespace}/{metadata.name}")
        return stored

    def update(self, component: Component) -> Component:
        """Write a new spec (and labels/annotations).

        The generation is bumped when the spec changes. The stored status is
        kept whatever the submitted document carries.

        Raises:
            ValidationError: If the component is invalid.
            NotFoundError: If it does not exist.
            ConflictError: If its resourceVersion is stale.
        """
        component = submit(component)
        with self._lock:
            current = self._current_for_write(component)
            generation = current.metadata.generation
            if component.spec != current.spec:
                generation += 1
            metadata = _with_meta(
                current.metadata,
                labels=component.metadata.labels,
                annotations=component.metadata.annotations,
                generation=generation,
            )
            updated = current.model_copy(update={"spec": component.spec, "metadata": metadata})
            stored = self._save(updated)

        logger.info(
            f"Updated component {stored.metadata.namespace}/{stored.metadata.name} "
            f"(generation {stored.metadata.generation})"
        )
        return stored

    def update_status(self, component: Component, reset_lineage: bool = False) -> Component:
        """Write a new status. Spec and metadata are kept as stored.

        The write is checked against the stored commit lineage: the GitOps
        commit only moves forward unless ``reset_lineage`` starts a new
        lineage, and ``resourceGenerationSkipped`` must mirror the stored spec.

        Raises:
            NotFoundError: If it does not exist.
            ConflictError: If its resourceVersion is stale.
            StatusTransitionError: If the status write is not allowed.
        """
        with self._lock:
            current = self._current_for_write(component)
            accepted, lineage = transition_status(
                current.status,
                component.status,
                self._fetch_lineage(current.key),
                reset_lineage=reset_lineage,
                spec=current.spec,
            )
            updated = current.model_copy(update={"status": accepted})
            stored = self._save(updated, lineage)

        logger.debug(
            f"Updated status of component {stored.metadata.namespace}/{stored.metadata.name}"
        )
        return stored

    def delete(
        self, name: str, namespace: str | None = None, resource_version: str = ""
    ) -> None:
        """Delete a component. Deletion is final.

        Raises:
            NotFoundError: If it does not exist.
            ConflictError: If ``resource_version`` is given and stale.
        """
        key = (namespace or self.default_namespace, name)
        with self._lock:
            row = self._fetch_row(key)
            if row is None:
                raise NotFoundError(key)
            current = self._to_component(row)
            if resource_version and resource_version != current.metadata.resourceVersion:
                raise ConflictError(key, resource_version, current.metadata.resourceVersion)
            self.conn.execute(
                "DELETE FROM components WHERE namespace = ? AND name = ?", list(key)
            )
        logger.info(f"Deleted component {key[0]}/{key[1]}")

    ## Implementation ##########################################################

    def _fetch_row(self, key: tuple[str, str]) -> tuple | None:
        return self.conn.execute(
            "SELECT document FROM components WHERE namespace = ? AND name = ?",
            list(key),
        ).fetchone()

    def _fetch_lineage(self, key: tuple[str, str]) -> CommitLineage | None:
        row = self.conn.execute(
            "SELECT commit_lineage FROM components WHERE namespace = ? AND name = ?",
            list(key),
        ).fetchone()
        if row is None:
            return None
        commits = row[0]
        if isinstance(commits, str):
            commits = json.loads(commits)
        return CommitLineage(commits=tuple(commits))

    def _next_version(self) -> int:
        return self.conn.execute("SELECT nextval('resource_version_seq')").fetchone()[0]

    def _current_for_write(self, component: Component) -> Component:
        key = (component.metadata.namespace or self.default_namespace, component.metadata.name)
        row = self._fetch_row(key)
        if row is None:
            raise NotFoundError(key)
        current = self._to_component(row)
        expected = component.metadata.resourceVersion
        if expected != current.metadata.resourceVersion:
            raise ConflictError(key, expected, current.metadata.resourceVersion)
        return current

    def _save(self, component: Component, lineage: CommitLineage | None = None) -> Component:
        version = self._next_version()
        metadata = _with_meta(component.metadata, resourceVersion=str(version))
        stored = component.model_copy(update={"metadata": metadata})
        self.conn.execute(
            """
            UPDATE components
            SET application = ?, resource_version = ?, generation = ?, document = ?
            WHERE namespace = ? AND name = ?
            """,
            [
                stored.spec.application,
                version,
                metadata.generation,
                json.dumps(stored.to_wire()),
                metadata.namespace,
                metadata.name,
            ],
        )
        if lineage is not None:
            self.conn.execute(
                "UPDATE components SET commit_lineage = ? WHERE namespace = ? AND name = ?",
                [json.dumps(list(lineage.commits)), metadata.namespace, metadata.name],
            )
        return stored

    def _to_component(self, row: tuple) -> Component:
        document = row[0]
        if isinstance(document, str):
            document = json.loads(document)
        return Component.model_validate(document)


def _with_meta(metadata: ObjectMeta, **changes: Any) -> ObjectMeta:
    return ObjectMeta.model_validate({**metadata.model_dump(), **changes})


def _encode_continue(key: tuple[str, str]) -> str:
    raw = json.dumps({"namespace": key[0], "name": key[1]}, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def _decode_continue(token: str) -> tuple[str, str]:
    try:
        data = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
        return data["namespace"], data["name"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        raise ValidationError(
            [Violation(path="continue", message="malformed continue token", type="value_error")]
        ) from e
