"""Locations of the catalog database and locally stored uploads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "catalogsync"
DATA_DIR_ENV: Final[str] = "CATALOGSYNC_DATA_DIR"
DEFAULT_DB_FILENAME: Final[str] = "catalogsync.db"
UPLOADS_DIRNAME: Final[str] = "uploads"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory holding the SQLite database and the uploads directory."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    uploads_dirname: str = UPLOADS_DIRNAME

    def _entry(self, name: str, *, ensure: bool) -> Path:
        base = self.data_dir.expanduser().resolve()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base / name

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._entry(self.database_filename, ensure=ensure)

    def uploads_path(self, *, ensure: bool = True) -> Path:
        return self._entry(self.uploads_dirname, ensure=ensure)

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    """``CATALOGSYNC_DATA_DIR`` or ``$XDG_DATA_HOME/catalogsync``."""

    env_dir = optional_env_var(DATA_DIR_ENV)
    if env_dir is not None:
        return StorageConfig(data_dir=Path(env_dir))
    xdg_home = optional_env_var("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home is not None else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri is not None:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
