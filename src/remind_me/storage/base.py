"""Key-value storage port shared by reminders, tags and the locale preference."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

# Storage keys
REMINDERS_V2_KEY = "reminders_v2"
REMINDERS_V1_KEY = "reminders"
TAGS_V1_KEY = "tags_v1"
LOCALE_KEY = "remind-me-locale"


class StoragePort(ABC):
    """名前付き文字列キーに対するget/setの抽象

    get()は例外を送出しない（読めない値は存在しない扱い）。
    set()は失敗時にStorageErrorを送出する。
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """キーに対応する値を返す。存在しない・読めない場合はNone"""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """値を保存する

        Raises:
            StorageError: 保存先が利用できない、または書き込みに失敗した場合
        """
        pass
