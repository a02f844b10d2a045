"""DuckDB schema definitions."""

import duckdb


def get_connection(path: str = ":memory:") -> duckdb.DuckDBPyConnection:
    """Get a DuckDB connection."""
    return duckdb.connect(path)


def create_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create DuckDB tables for stored components."""

    conn.execute("""
        CREATE TABLE IF NOT EXISTS components (
            namespace VARCHAR NOT NULL,
            name VARCHAR NOT NULL,
            uid VARCHAR NOT NULL,
            application VARCHAR NOT NULL,
            resource_version BIGINT NOT NULL,
            generation BIGINT NOT NULL,
            document JSON NOT NULL,
            commit_lineage JSON NOT NULL,
            created_at TIMESTAMP DEFAULT current_timestamp,
            PRIMARY KEY(namespace, name)
        )
    """)

    # Shared counter behind every resourceVersion handed out
    conn.execute("""
        CREATE SEQUENCE IF NOT EXISTS resource_version_seq START 1
    """)
