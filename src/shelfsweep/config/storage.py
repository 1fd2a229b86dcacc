"""Location of the catalog database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_flag

APP_DIR_NAME: Final[str] = "shelfsweep"
DEFAULT_DB_FILENAME: Final[str] = "catalog.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_filename

    def database_uri(self, *, create_dir: bool = True) -> str:
        if create_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def platform_data_home() -> Path:
    """Per-user data root: ``LOCALAPPDATA`` on Windows, ``XDG_DATA_HOME`` elsewhere."""

    if os.name == "nt":
        override = os.getenv("LOCALAPPDATA")
        fallback = Path.home() / "AppData" / "Local"
    else:
        override = os.getenv("XDG_DATA_HOME")
        fallback = Path.home() / ".local" / "share"
    return Path(override) if override else fallback


def get_storage_config() -> StorageConfig:
    explicit = os.getenv("SHELFSWEEP_DATA_DIR")
    data_dir = Path(explicit) if explicit else platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = os.getenv("DATABASE_URI") or (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri, echo=env_flag("SHELFSWEEP_SQL_ECHO", default=False))
