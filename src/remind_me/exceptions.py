"""Remind Meのカスタム例外定義

ストレージ層・設定読み込みで送出される例外をまとめる。
コア(クエリ/日付/ロケール/ルーティング)は例外を呼び出し側へ送出しない。
"""

from __future__ import annotations

from enum import Enum


class RemindMeError(Exception):
    """Remind Me基底例外"""

    pass


class StorageErrorKind(str, Enum):
    """ストレージ失敗の種別"""

    UNAVAILABLE = "unavailable"
    SERIALIZATION_FAILED = "serialization_failed"
    SAVE_FAILED = "save_failed"


class StorageError(RemindMeError):
    """キーバリューストレージへの書き込み失敗"""

    def __init__(self, kind: StorageErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value)


class ConfigurationError(RemindMeError):
    """設定エラー"""

    pass
