"""Configuration models for hasapi."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class HasApiSettings(BaseModel):
    """Global settings."""

    log_level: LogLevel = Field(default="INFO", description="Root log level")
    default_namespace: str = Field(
        default="default", description="Namespace used when a resource names none"
    )
    list_page_size: int = Field(
        default=500, gt=0, description="Items per page when listing components"
    )
    database: str = Field(
        default=":memory:", description="DuckDB database path for the component store"
    )


class HasApiConfig(BaseModel):
    """Root configuration model."""

    version: int = Field(default=1)
    settings: HasApiSettings = Field(default_factory=HasApiSettings)
