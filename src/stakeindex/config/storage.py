"""Where the index database and the sidecar response cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "STAKEINDEX_DATA_DIR"
DATABASE_URI_ENV = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Files kept under one data directory, created on first use."""

    data_dir: Path

    def _file(self, name: str, *, ensure: bool) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / name

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self._file('stakeindex.db', ensure=True)}"

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self._file("sidecar_cache.db", ensure=ensure)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV)
    if configured:
        return StorageConfig(data_dir=Path(configured))
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base / "stakeindex")


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    uri = os.getenv(DATABASE_URI_ENV)
    if uri:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
