"""In-process key-value storage, the stand-in for a browser's local store."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ..exceptions import StorageError, StorageErrorKind
from .base import StoragePort

logger = logging.getLogger(__name__)


class MemoryStorage(StoragePort):
    """
    Dictionary-backed storage.

    ``quota_bytes`` mimics the per-origin quota of browser storage: a write that
    would push the total size of all values over the quota fails with
    ``SAVE_FAILED``. ``available=False`` makes every write fail with
    ``UNAVAILABLE``, like a disabled local store.
    """

    def __init__(
        self,
        initial: Optional[Dict[str, str]] = None,
        *,
        quota_bytes: Optional[int] = None,
        available: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes
        self.available = available

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not self.available:
            raise StorageError(StorageErrorKind.UNAVAILABLE, "memory storage is disabled")
        with self._lock:
            if self.quota_bytes is not None:
                used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
                if used + len(value.encode("utf-8")) > self.quota_bytes:
                    logger.warning("Storage quota exceeded while writing %s", key)
                    raise StorageError(StorageErrorKind.SAVE_FAILED, "storage quota exceeded")
            self._data[key] = value

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
