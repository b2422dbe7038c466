"""Reminder persistence, date handling and queries."""

from .dates import (
    extract_calendar_day_key,
    format_for_display,
    is_overdue,
    now_rfc3339,
    parse_to_instant,
    to_editable_local_value,
    to_rfc3339,
)
from .models import LegacyReminder, Reminder, ReminderFilter, ReminderSort, Statistics, Tag
from .query import (
    compute_statistics,
    group_by_calendar_day,
    group_by_tag,
    resolve_tags,
    select_and_sort,
    unscheduled,
)
from .repository import UNSET, ReminderRepository
from .store import MigrationOutcome, ReminderStore

__all__ = [
    "Reminder",
    "LegacyReminder",
    "Tag",
    "ReminderFilter",
    "ReminderSort",
    "Statistics",
    "ReminderStore",
    "MigrationOutcome",
    "ReminderRepository",
    "UNSET",
    "parse_to_instant",
    "is_overdue",
    "format_for_display",
    "to_editable_local_value",
    "extract_calendar_day_key",
    "to_rfc3339",
    "now_rfc3339",
    "select_and_sort",
    "compute_statistics",
    "group_by_calendar_day",
    "group_by_tag",
    "resolve_tags",
    "unscheduled",
]
