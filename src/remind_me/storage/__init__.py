"""Key-value storage port and its interchangeable backends."""

from pathlib import Path
from typing import Optional

from ..config import StorageConfig
from ..exceptions import StorageError, StorageErrorKind
from .base import LOCALE_KEY, REMINDERS_V1_KEY, REMINDERS_V2_KEY, TAGS_V1_KEY, StoragePort
from .file import FileStorage
from .memory import MemoryStorage
from .sqlite import SqliteStorage


def create_storage(config: Optional[StorageConfig] = None) -> StoragePort:
    """Select the storage backend named by the configuration."""
    config = config or StorageConfig()
    data_dir = Path(config.data_dir)
    if config.backend == "memory":
        return MemoryStorage()
    if config.backend == "sqlite":
        return SqliteStorage(db_path=data_dir / config.sqlite_file)
    return FileStorage(data_dir=data_dir)


__all__ = [
    "StoragePort",
    "StorageError",
    "StorageErrorKind",
    "MemoryStorage",
    "FileStorage",
    "SqliteStorage",
    "create_storage",
    "REMINDERS_V2_KEY",
    "REMINDERS_V1_KEY",
    "TAGS_V1_KEY",
    "LOCALE_KEY",
]
