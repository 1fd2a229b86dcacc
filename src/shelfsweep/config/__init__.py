"""Application configuration helpers."""

from __future__ import annotations

from .detection import DetectionConfig, get_detection_config
from .env import env_flag, env_int
from .errors import ConfigurationError
from .logging import configure_logging, resolve_log_level
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "DetectionConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_database_config",
    "get_detection_config",
    "get_storage_config",
    "resolve_log_level",
]
