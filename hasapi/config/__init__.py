"""Configuration module for hasapi."""

from .loader import ConfigLoader, load_config
from .models import HasApiConfig, HasApiSettings

__all__ = [
    "ConfigLoader",
    "HasApiConfig",
    "HasApiSettings",
    "load_config",
]
