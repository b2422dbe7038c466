"""
リマインダーのデータモデル定義

関連モジュール:
- reminders/store.py - バージョン付き永続化とスキーマ移行
- reminders/query.py - フィルタ・ソート・集計
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ReminderFilter(str, Enum):
    """一覧の絞り込み条件"""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str) -> "ReminderFilter":
        """未知の値はALL扱い"""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.ALL

    def matches(self, reminder: "Reminder") -> bool:
        if self is ReminderFilter.ACTIVE:
            return not reminder.completed
        if self is ReminderFilter.COMPLETED:
            return reminder.completed
        return True


class ReminderSort(str, Enum):
    """一覧の並び順"""

    DATE = "date"
    TITLE = "title"
    STATUS = "status"

    @classmethod
    def parse(cls, value: str) -> "ReminderSort":
        """未知の値はDATE扱い"""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.DATE


class Reminder(BaseModel):
    """現行スキーマ（reminders_v2）のリマインダー

    due_dateは空文字、RFC 3339（オフセット付き）、またはオフセットなしの
    "YYYY-MM-DDTHH:MM"（端末ローカル時刻）のいずれか。
    tag_idsはTag.idへの弱参照で、欠けている古いレコードでは空リストになる。
    """

    model_config = ConfigDict(strict=True)

    id: str
    title: str
    description: str
    due_date: str
    completed: bool
    created_at: str
    tag_ids: List[str] = Field(default_factory=list)


class LegacyReminder(BaseModel):
    """タグ導入前の旧スキーマ（reminders）"""

    model_config = ConfigDict(strict=True)

    id: str
    title: str
    description: str
    due_date: str
    completed: bool
    created_at: str

    def to_current(self) -> Reminder:
        return Reminder(
            id=self.id,
            title=self.title,
            description=self.description,
            due_date=self.due_date,
            completed=self.completed,
            created_at=self.created_at,
            tag_ids=[],
        )


class Tag(BaseModel):
    """タグ。色は "#FA8A59" のような16進カラーコード"""

    model_config = ConfigDict(strict=True)

    id: str
    name: str
    color: str


@dataclass(slots=True, frozen=True)
class Statistics:
    """リマインダー集計値。永続化されず、毎回再計算される"""

    total: int
    active: int
    completed: int
    overdue: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "active": self.active,
            "completed": self.completed,
            "overdue": self.overdue,
        }


ReminderList = TypeAdapter(List[Reminder])
LegacyReminderList = TypeAdapter(List[LegacyReminder])
TagList = TypeAdapter(List[Tag])
