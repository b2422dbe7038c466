"""Filter, search, sort and aggregate over an in-memory reminder collection.

Every function here is pure: inputs are never mutated and a fresh list is
returned. "now" is read on each call, never cached.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .dates import extract_calendar_day_key, is_overdue, parse_for_sort, parse_to_instant
from .models import Reminder, ReminderFilter, ReminderSort, Statistics, Tag


def matches_search(reminder: Reminder, search_query: str) -> bool:
    """Case-insensitive substring match on title or description."""
    if not search_query:
        return True
    needle = search_query.casefold()
    return needle in reminder.title.casefold() or needle in reminder.description.casefold()


def select_and_sort(
    reminders: Iterable[Reminder],
    filter_by: ReminderFilter = ReminderFilter.ALL,
    search_query: str = "",
    sort_by: ReminderSort = ReminderSort.DATE,
    tz: Optional[tzinfo] = None,
) -> List[Reminder]:
    """
    Filter by status and search text, then stable-sort.

    Date sorts ascending by due instant with empty/unparseable dates last;
    Title sorts lexicographically; Status puts completed after incomplete and
    otherwise keeps the original order.
    """
    selected = [r for r in reminders if filter_by.matches(r) and matches_search(r, search_query)]

    if sort_by is ReminderSort.TITLE:
        selected.sort(key=lambda r: r.title)
    elif sort_by is ReminderSort.STATUS:
        selected.sort(key=lambda r: r.completed)
    else:
        selected.sort(key=lambda r: parse_for_sort(r.due_date, tz))
    return selected


def compute_statistics(
    reminders: Sequence[Reminder],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Statistics:
    completed = sum(1 for r in reminders if r.completed)
    overdue = sum(
        1 for r in reminders if not r.completed and r.due_date and is_overdue(r.due_date, now, tz)
    )
    return Statistics(
        total=len(reminders),
        active=len(reminders) - completed,
        completed=completed,
        overdue=overdue,
    )


def group_by_calendar_day(
    reminders: Iterable[Reminder], tz: Optional[tzinfo] = None
) -> Dict[str, List[Reminder]]:
    """
    Bucket reminders by local ``YYYY-MM-DD`` of their due date.

    Reminders without a parseable due date are left out; use ``unscheduled``
    for those. Each bucket is ordered by due instant.
    """
    buckets: Dict[str, List[Reminder]] = {}
    for reminder in reminders:
        key = extract_calendar_day_key(reminder.due_date, tz)
        if key is None:
            continue
        buckets.setdefault(key, []).append(reminder)
    for bucket in buckets.values():
        bucket.sort(key=lambda r: parse_for_sort(r.due_date, tz))
    return dict(sorted(buckets.items()))


def unscheduled(reminders: Iterable[Reminder], tz: Optional[tzinfo] = None) -> List[Reminder]:
    """Reminders with an empty or unparseable due date."""
    return [r for r in reminders if parse_to_instant(r.due_date, tz) is None]


def group_by_tag(
    reminders: Sequence[Reminder], tags: Sequence[Tag]
) -> Tuple[List[Tuple[Tag, List[Reminder]]], List[Reminder]]:
    """
    Folder view: ``(tag, reminders)`` pairs in tag order, skipping empty tags,
    plus the reminders that reference no existing tag (including ones whose
    tags were all deleted).
    """
    groups: List[Tuple[Tag, List[Reminder]]] = []
    for tag in tags:
        tagged = [r for r in reminders if tag.id in r.tag_ids]
        if tagged:
            groups.append((tag, tagged))
    known = {tag.id for tag in tags}
    untagged = [r for r in reminders if not known.intersection(r.tag_ids)]
    return groups, untagged


def resolve_tags(reminder: Reminder, tags: Sequence[Tag]) -> List[Tag]:
    """Tags referenced by a reminder, in reference order; dangling ids are skipped."""
    by_id = {tag.id: tag for tag in tags}
    return [by_id[tag_id] for tag_id in reminder.tag_ids if tag_id in by_id]
