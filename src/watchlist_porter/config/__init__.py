"""Configuration management module."""

from .config_manager import ConfigManager
from .models import (
    CatalogConfig,
    Config,
    ExportConfig,
    ImportConfig,
    LoggingConfig,
    StoreConfig,
)

__all__ = [
    "ConfigManager",
    "Config",
    "CatalogConfig",
    "StoreConfig",
    "ImportConfig",
    "ExportConfig",
    "LoggingConfig",
]
