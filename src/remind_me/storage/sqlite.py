"""SQLite-backed key-value storage."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..exceptions import StorageError, StorageErrorKind
from .base import StoragePort

logger = logging.getLogger(__name__)


class SqliteStorage(StoragePort):
    """SQLiteベースのキーバリューストア。kv_storeテーブル1つで全キーを保持する。"""

    def __init__(self, db_path: Optional[Path] = None):
        root = Path(__file__).resolve().parents[3]
        default_path = root / "data" / "remind_me.db"
        env_path = os.getenv("REMIND_ME_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def get(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Failed to read %s from %s: %s", key, self.db_path, exc)
            return None
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, value, self._now()),
                )
                conn.commit()
        except sqlite3.OperationalError as exc:
            raise StorageError(StorageErrorKind.UNAVAILABLE, str(exc)) from exc
        except sqlite3.Error as exc:
            raise StorageError(StorageErrorKind.SAVE_FAILED, str(exc)) from exc
