"""
メモリ上のリマインダー・タグ管理

起動時にReminderStoreから一度だけ読み込み、以降はメモリ上のリストが正。
変更のたびにbest-effortで保存し、失敗してもメモリ上のデータは保持する。
"""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .dates import now_rfc3339, now_timestamp_millis, to_rfc3339
from .models import Reminder, ReminderFilter, ReminderSort, Statistics, Tag
from .query import compute_statistics, group_by_calendar_day, group_by_tag, resolve_tags, select_and_sort
from .store import ReminderStore

logger = logging.getLogger(__name__)

UNSET = object()

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
DEFAULT_TAG_COLOR = "#FA8A59"


class ReminderRepository:
    """リマインダーとタグのCRUD。変更は1件ずつ直列化される。"""

    def __init__(self, store: ReminderStore):
        self.store = store
        self._lock = threading.Lock()
        self._reminders: List[Reminder] = store.load_reminders()
        self._tags: List[Tag] = store.load_tags()
        self.last_save_ok = True

    # --- reminders -----------------------------------------------------------

    def list(self) -> List[Reminder]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._reminders]

    def get(self, reminder_id: str) -> Optional[Reminder]:
        with self._lock:
            found = self._find(reminder_id)
            return found.model_copy(deep=True) if found else None

    def _find(self, reminder_id: str) -> Optional[Reminder]:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        return None

    def _new_id(self, prefix: str, existing: Iterable[str]) -> str:
        taken = set(existing)
        candidate = f"{prefix}_{now_timestamp_millis()}"
        suffix = 1
        while candidate in taken:
            candidate = f"{prefix}_{now_timestamp_millis()}_{suffix}"
            suffix += 1
        return candidate

    def _persist_reminders(self) -> None:
        self.last_save_ok = self.store.save_reminders(self._reminders)
        if not self.last_save_ok:
            logger.warning("Reminder changes kept in memory only; will retry on next change")

    def create(
        self,
        title: str,
        description: str = "",
        due_date: str = "",
        tag_ids: Sequence[str] = (),
        tz: Optional[tzinfo] = None,
    ) -> Reminder:
        if not title or not title.strip():
            raise ValueError("title is required")
        with self._lock:
            reminder = Reminder(
                id=self._new_id("reminder", (r.id for r in self._reminders)),
                title=title.strip(),
                description=description.strip(),
                due_date=to_rfc3339(due_date.strip(), tz),
                completed=False,
                created_at=now_rfc3339(),
                tag_ids=list(dict.fromkeys(tag_ids)),
            )
            self._reminders.append(reminder)
            self._persist_reminders()
            logger.info("Reminder created: %s", reminder.id)
            return reminder.model_copy(deep=True)

    def update(
        self,
        reminder_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Any = UNSET,
        tag_ids: Optional[Sequence[str]] = None,
        completed: Optional[bool] = None,
        tz: Optional[tzinfo] = None,
    ) -> Optional[Reminder]:
        """指定フィールドのみ更新。due_date=None または "" で期限をクリア"""
        with self._lock:
            reminder = self._find(reminder_id)
            if reminder is None:
                return None

            changes: Dict[str, Any] = {}
            if title is not None:
                changes["title"] = title.strip()
            if description is not None:
                changes["description"] = description.strip()
            if due_date is not UNSET:
                changes["due_date"] = to_rfc3339((due_date or "").strip(), tz)
            if tag_ids is not None:
                changes["tag_ids"] = list(dict.fromkeys(tag_ids))
            if completed is not None:
                changes["completed"] = bool(completed)

            if changes:
                for field_name, value in changes.items():
                    setattr(reminder, field_name, value)
                self._persist_reminders()
            return reminder.model_copy(deep=True)

    def toggle(self, reminder_id: str) -> Optional[Reminder]:
        with self._lock:
            reminder = self._find(reminder_id)
            if reminder is None:
                return None
            reminder.completed = not reminder.completed
            self._persist_reminders()
            return reminder.model_copy(deep=True)

    def delete(self, reminder_id: str) -> bool:
        with self._lock:
            before = len(self._reminders)
            self._reminders = [r for r in self._reminders if r.id != reminder_id]
            if len(self._reminders) == before:
                return False
            self._persist_reminders()
            logger.info("Reminder deleted: %s", reminder_id)
            return True

    # --- tags ----------------------------------------------------------------

    def list_tags(self) -> List[Tag]:
        with self._lock:
            return [t.model_copy() for t in self._tags]

    def get_tag(self, tag_id: str) -> Optional[Tag]:
        with self._lock:
            for tag in self._tags:
                if tag.id == tag_id:
                    return tag.model_copy()
        return None

    def _persist_tags(self) -> None:
        self.last_save_ok = self.store.save_tags(self._tags)
        if not self.last_save_ok:
            logger.warning("Tag changes kept in memory only; will retry on next change")

    def _upsert_tag(self, tag: Tag) -> Tag:
        for index, existing in enumerate(self._tags):
            if existing.id == tag.id:
                self._tags[index] = tag
                break
        else:
            self._tags.append(tag)
        self._persist_tags()
        return tag.model_copy()

    def create_tag(self, name: str, color: str = DEFAULT_TAG_COLOR) -> Tag:
        if not name or not name.strip():
            raise ValueError("tag name is required")
        if not _HEX_COLOR_RE.match(color):
            raise ValueError(f"invalid hex color: {color!r}")
        with self._lock:
            tag_id = self._new_id("tag", (t.id for t in self._tags))
            return self._upsert_tag(Tag(id=tag_id, name=name.strip(), color=color))

    def update_tag(
        self, tag_id: str, *, name: Optional[str] = None, color: Optional[str] = None
    ) -> Optional[Tag]:
        if color is not None and not _HEX_COLOR_RE.match(color):
            raise ValueError(f"invalid hex color: {color!r}")
        with self._lock:
            current = next((t for t in self._tags if t.id == tag_id), None)
            if current is None:
                return None
            return self._upsert_tag(
                Tag(
                    id=tag_id,
                    name=name.strip() if name and name.strip() else current.name,
                    color=color or current.color,
                )
            )

    def delete_tag(self, tag_id: str) -> bool:
        """タグを削除する。リマインダー側の参照は残る（表示時は「タグなし」扱い）"""
        with self._lock:
            before = len(self._tags)
            self._tags = [t for t in self._tags if t.id != tag_id]
            if len(self._tags) == before:
                return False
            self._persist_tags()
            return True

    def tags_for(self, reminder: Reminder) -> List[Tag]:
        with self._lock:
            return resolve_tags(reminder, self._tags)

    def prune_dangling_tag_ids(self) -> int:
        """存在しないタグへの参照を取り除き、除去した参照数を返す"""
        with self._lock:
            known = {t.id for t in self._tags}
            removed = 0
            for reminder in self._reminders:
                kept = [tag_id for tag_id in reminder.tag_ids if tag_id in known]
                removed += len(reminder.tag_ids) - len(kept)
                reminder.tag_ids = kept
            if removed:
                self._persist_reminders()
            return removed

    # --- queries -------------------------------------------------------------

    def select(
        self,
        filter_by: ReminderFilter = ReminderFilter.ALL,
        search_query: str = "",
        sort_by: ReminderSort = ReminderSort.DATE,
        tz: Optional[tzinfo] = None,
    ) -> List[Reminder]:
        return select_and_sort(self.list(), filter_by, search_query, sort_by, tz)

    def statistics(self, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> Statistics:
        return compute_statistics(self.list(), now, tz)

    def calendar(self, tz: Optional[tzinfo] = None) -> Dict[str, List[Reminder]]:
        return group_by_calendar_day(self.list(), tz)

    def folders(self) -> Tuple[List[Tuple[Tag, List[Reminder]]], List[Reminder]]:
        return group_by_tag(self.list(), self.list_tags())

    def save_all(self) -> bool:
        """現在のメモリ上の状態をまとめて保存（前回失敗した書き込みの再試行用）"""
        with self._lock:
            reminders_ok = self.store.save_reminders(self._reminders)
            tags_ok = self.store.save_tags(self._tags)
            self.last_save_ok = reminders_ok and tags_ok
            return self.last_save_ok
