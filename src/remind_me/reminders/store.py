"""
リマインダーとタグのバージョン付き永続化

StoragePort上に以下のキーで保存する:
  reminders_v2 - 現行スキーマ（tag_idsあり）
  reminders    - 旧スキーマ（tag_idsなし）。読み込み時にv2へ移行して書き戻す
  tags_v1      - タグ

読み込みは例外を送出しない（壊れたデータは存在しない扱い）。
書き込み失敗はログに残してFalseを返す。メモリ上の状態が常に正となる。
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..exceptions import StorageError, StorageErrorKind
from ..storage.base import REMINDERS_V1_KEY, REMINDERS_V2_KEY, TAGS_V1_KEY, StoragePort
from .models import LegacyReminderList, Reminder, ReminderList, Tag, TagList


class MigrationOutcome(str, Enum):
    """直近の読み込みで行われた旧スキーマ移行の結果"""

    NONE = "none"
    MIGRATED = "migrated"
    MIGRATED_UNSAVED = "migrated_unsaved"


class ReminderStore:
    """StoragePort上のリマインダー・タグ永続化エンジン"""

    def __init__(self, storage: StoragePort, logger: Optional[logging.Logger] = None):
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)
        self.last_migration = MigrationOutcome.NONE

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.get(key)
        except Exception as exc:
            self.logger.warning("Storage read failed for %s: %s", key, exc)
            return None

    def _load_current(self) -> Optional[List[Reminder]]:
        data = self._read(REMINDERS_V2_KEY)
        if data is None:
            return None
        try:
            return ReminderList.validate_json(data)
        except ValidationError as exc:
            self.logger.warning(
                "Ignoring unparseable reminders under %s (%d errors)", REMINDERS_V2_KEY, exc.error_count()
            )
            return None

    def _load_legacy(self) -> Optional[List[Reminder]]:
        data = self._read(REMINDERS_V1_KEY)
        if data is None:
            return None
        try:
            legacy = LegacyReminderList.validate_json(data)
        except ValidationError as exc:
            self.logger.warning(
                "Ignoring unparseable reminders under %s (%d errors)", REMINDERS_V1_KEY, exc.error_count()
            )
            return None
        return [item.to_current() for item in legacy]

    def migrate(self) -> MigrationOutcome:
        """旧スキーマのデータがあり現行キーが無効な場合のみ、移行して書き戻す"""
        self.load_reminders()
        return self.last_migration

    def load_reminders(self) -> List[Reminder]:
        """
        リマインダーを読み込む

        1. reminders_v2 が読めればそのまま返す
        2. reminders（旧スキーマ）が読めれば tag_ids=[] で移行し、v2へ書き戻して返す
           （書き戻し失敗はログのみで、移行済みデータは返す）
        3. どちらも無ければ空リスト
        """
        current = self._load_current()
        if current is not None:
            self.last_migration = MigrationOutcome.NONE
            self.logger.debug("Loaded %d reminders from %s", len(current), REMINDERS_V2_KEY)
            return current

        migrated = self._load_legacy()
        if migrated is None:
            self.last_migration = MigrationOutcome.NONE
            return []

        self.logger.info(
            "Migrating %d reminders from %s to %s", len(migrated), REMINDERS_V1_KEY, REMINDERS_V2_KEY
        )
        if self.save_reminders(migrated):
            self.last_migration = MigrationOutcome.MIGRATED
        else:
            self.last_migration = MigrationOutcome.MIGRATED_UNSAVED
        return migrated

    def save_reminders(self, reminders: Sequence[Reminder]) -> bool:
        """現行キーへ保存。失敗してもFalseを返すだけで例外は送出しない"""
        return self._write(REMINDERS_V2_KEY, lambda: ReminderList.dump_json(list(reminders)))

    def load_tags(self) -> List[Tag]:
        """タグを読み込む。無い・壊れている場合は空リスト"""
        data = self._read(TAGS_V1_KEY)
        if data is None:
            return []
        try:
            return TagList.validate_json(data)
        except ValidationError as exc:
            self.logger.warning(
                "Ignoring unparseable tags under %s (%d errors)", TAGS_V1_KEY, exc.error_count()
            )
            return []

    def save_tags(self, tags: Sequence[Tag]) -> bool:
        return self._write(TAGS_V1_KEY, lambda: TagList.dump_json(list(tags)))

    def _write(self, key: str, serialize) -> bool:
        try:
            payload = serialize().decode("utf-8")
        except (ValueError, TypeError) as exc:
            self.logger.error(
                "Failed to serialize %s (%s): %s", key, StorageErrorKind.SERIALIZATION_FAILED.value, exc
            )
            return False
        try:
            self.storage.set(key, payload)
        except StorageError as exc:
            self.logger.error("Failed to save %s (%s): %s", key, exc.kind.value, exc)
            return False
        return True
