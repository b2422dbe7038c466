"""File-based key-value storage: one ``<key>.json`` file per key."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..exceptions import StorageError, StorageErrorKind
from .base import StoragePort

logger = logging.getLogger(__name__)


class FileStorage(StoragePort):
    """
    Stores each key as ``{data_dir}/{key}.json``.

    The directory is created lazily on the first write. Writes go through a
    temporary file and ``os.replace`` so a crash never leaves a half-written
    value behind.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        root = Path(__file__).resolve().parents[3]
        default_dir = root / "data"
        env_dir = os.getenv("REMIND_ME_DATA_DIR")
        if data_dir:
            self.data_dir = Path(data_dir)
        elif env_dir:
            self.data_dir = Path(env_dir)
        else:
            self.data_dir = default_dir

    def _path_for(self, key: str) -> Optional[Path]:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            return None
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if path is None:
            logger.warning("Rejected storage key: %r", key)
            return None
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        if path is None:
            raise StorageError(StorageErrorKind.SAVE_FAILED, f"invalid storage key: {key!r}")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(StorageErrorKind.UNAVAILABLE, str(exc)) from exc

        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_exc:
                logger.debug("Could not remove %s: %s", tmp_path, cleanup_exc)
            raise StorageError(StorageErrorKind.SAVE_FAILED, str(exc)) from exc
