"""Where pokesync keeps its SQLite catalog and the HTTP cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_str

APP_DIR_NAME: Final[str] = "pokesync"
DEFAULT_DB_FILENAME: Final[str] = "pokesync.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def database_path(self) -> Path:
        return self._in_data_dir(DEFAULT_DB_FILENAME)

    def http_cache_path(self) -> Path:
        return self._in_data_dir(HTTP_CACHE_FILENAME)

    def _in_data_dir(self, filename: str) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / filename


def get_storage_config() -> StorageConfig:
    """``POKESYNC_DATA_DIR``, else ``$XDG_DATA_HOME/pokesync`` (``~/.local/share``)."""

    configured = env_str("POKESYNC_DATA_DIR", "")
    if configured:
        data_dir = Path(configured)
    else:
        data_home = env_str("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))
        data_dir = Path(data_home) / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_uri() -> str:
    """``DATABASE_URI`` when set, otherwise the SQLite file in the data dir."""

    return env_str("DATABASE_URI", "") or (
        f"sqlite+pysqlite:///{get_storage_config().database_path()}"
    )
