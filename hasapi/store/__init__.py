"""Optimistic-concurrency storage for Components."""

from .schema import create_schema, get_connection
from .store import ComponentStore

__all__ = [
    "ComponentStore",
    "create_schema",
    "get_connection",
]
