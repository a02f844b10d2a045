"""Configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from .models import HasApiConfig, HasApiSettings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load hasapi configuration."""

    CONFIG_FILENAME = "hasapi.yaml"
    USER_CONFIG_DIR = Path.home() / ".hasapi"

    # Environment variable overriding settings.log_level
    LOG_LEVEL_ENV = "HASAPI_LOG_LEVEL"

    def __init__(self, project_path: Path | None = None):
        """Initialize config loader.

        Args:
            project_path: Project directory path. If None, uses current directory.
        """
        self._project_path = project_path or Path.cwd()

    def get_config_path(self) -> Path | None:
        """Find config file (project-level first, then user-level).

        Returns:
            Path to config file if found, None otherwise.
        """
        project_config = self._project_path / self.CONFIG_FILENAME
        if project_config.exists():
            return project_config

        user_config = self.USER_CONFIG_DIR / self.CONFIG_FILENAME
        if user_config.exists():
            return user_config

        return None

    def load(self, config_path: Path | None = None) -> HasApiConfig:
        """Load configuration, returning defaults if no config exists.

        The log level may be overridden with $HASAPI_LOG_LEVEL.

        Args:
            config_path: Explicit config file; searched for if None.

        Returns:
            HasApiConfig with loaded or default values.
        """
        return self._apply_env(self._load_file(config_path or self.get_config_path()))

    def _load_file(self, config_path: Path | None) -> HasApiConfig:
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return HasApiConfig()

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            logger.info(f"Loaded config from: {config_path}")
            return HasApiConfig.model_validate(data)
        except Exception as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return HasApiConfig()

    def _apply_env(self, config: HasApiConfig) -> HasApiConfig:
        level = os.environ.get(self.LOG_LEVEL_ENV)
        if not level:
            return config
        data = config.settings.model_dump()
        data["log_level"] = level.upper()
        try:
            settings = HasApiSettings.model_validate(data)
        except ValueError as e:
            logger.warning(f"Ignoring ${self.LOG_LEVEL_ENV}={level!r}: {e}")
            return config
        return config.model_copy(update={"settings": settings})


def load_config(
    project_path: Path | str | None = None, config_path: Path | str | None = None
) -> HasApiConfig:
    """Load configuration from an explicit file, or the project or user directory.

    Args:
        project_path: Project directory path. If None, uses current directory.
        config_path: Explicit config file, bypassing the search.

    Returns:
        HasApiConfig with loaded or default values.
    """
    path = Path(project_path) if project_path else None
    explicit = Path(config_path) if config_path else None
    return ConfigLoader(path).load(explicit)
