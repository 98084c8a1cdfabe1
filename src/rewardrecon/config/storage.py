"""Where the claim database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "rewardrecon"
DEFAULT_DB_FILENAME: Final[str] = "rewardrecon.db"


def default_data_dir() -> Path:
    """Platform data directory: ``%LOCALAPPDATA%`` on Windows, XDG data home elsewhere."""

    if os.name == "nt":
        root = optional_env_var("LOCALAPPDATA")
        base = Path(root) if root else Path.home() / "AppData" / "Local"
    else:
        root = optional_env_var("XDG_DATA_HOME")
        base = Path(root) if root else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local SQLite placement used when no ``DATABASE_URI`` is given."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_path(self, *, ensure: bool = True) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    configured = optional_env_var("REWARDRECON_DATA_DIR")
    return StorageConfig(data_dir=Path(configured) if configured else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file under the data directory."""

    uri = optional_env_var("DATABASE_URI")
    if uri is not None:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
