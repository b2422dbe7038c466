"""クエリエンジン（絞り込み・並び替え・集計）のテスト"""

from datetime import datetime, timezone

from remind_me.reminders import (
    Reminder,
    ReminderFilter,
    ReminderSort,
    Tag,
    compute_statistics,
    group_by_calendar_day,
    group_by_tag,
    resolve_tags,
    select_and_sort,
    unscheduled,
)

UTC = timezone.utc


def reminder(reminder_id, title="", description="", due_date="", completed=False, tag_ids=None):
    return Reminder(
        id=reminder_id,
        title=title or reminder_id,
        description=description,
        due_date=due_date,
        completed=completed,
        created_at="2024-01-01T00:00:00Z",
        tag_ids=list(tag_ids or []),
    )


def ids(items):
    return [item.id for item in items]


SAMPLE = [
    reminder("a", title="Buy milk", description="2 bottles", due_date="2024-03-06T10:00:00Z"),
    reminder("b", title="call mom", due_date="", completed=True),
    reminder("c", title="Dentist", description="Bring MILK money", due_date="2024-03-05T09:00"),
    reminder("d", title="Taxes", due_date="2024-03-04T00:00:00+09:00", completed=True),
    reminder("e", title="Anything", due_date="bad date"),
]


def test_filter_all_active_completed():
    assert ids(select_and_sort(SAMPLE, ReminderFilter.ALL, tz=UTC)) == ["d", "c", "a", "b", "e"]
    assert set(ids(select_and_sort(SAMPLE, ReminderFilter.ACTIVE, tz=UTC))) == {"a", "c", "e"}
    assert set(ids(select_and_sort(SAMPLE, ReminderFilter.COMPLETED, tz=UTC))) == {"b", "d"}


def test_search_is_case_insensitive_over_title_and_description():
    result = select_and_sort(SAMPLE, search_query="milk", tz=UTC)
    assert ids(result) == ["c", "a"]
    assert ids(select_and_sort(SAMPLE, search_query="MOM", tz=UTC)) == ["b"]
    assert select_and_sort(SAMPLE, search_query="zzz", tz=UTC) == []


def test_sort_by_title_is_lexicographic():
    result = select_and_sort(SAMPLE, sort_by=ReminderSort.TITLE)
    assert [r.title for r in result] == ["Anything", "Buy milk", "Dentist", "Taxes", "call mom"]


def test_sort_by_status_is_stable():
    result = select_and_sort(SAMPLE, sort_by=ReminderSort.STATUS)
    assert ids(result) == ["a", "c", "e", "b", "d"]


def test_sort_by_date_mixes_formats_and_puts_unknown_last():
    earlier = reminder("local", due_date="2024-03-05T08:00")
    later = reminder("rfc", due_date="2024-03-05T08:30:00Z")
    result = select_and_sort([later, reminder("none"), earlier], sort_by=ReminderSort.DATE, tz=UTC)
    assert ids(result) == ["local", "rfc", "none"]


def test_select_and_sort_does_not_mutate_input():
    items = list(SAMPLE)
    snapshot = [r.model_copy(deep=True) for r in items]
    first = select_and_sort(items, ReminderFilter.ACTIVE, "", ReminderSort.TITLE)
    second = select_and_sort(items, ReminderFilter.ACTIVE, "", ReminderSort.TITLE)
    assert items == snapshot
    assert first == second
    assert first is not items


def test_filter_and_sort_parse_unknown_values():
    assert ReminderFilter.parse("Active") is ReminderFilter.ACTIVE
    assert ReminderFilter.parse("nope") is ReminderFilter.ALL
    assert ReminderSort.parse("TITLE") is ReminderSort.TITLE
    assert ReminderSort.parse("") is ReminderSort.DATE


def test_compute_statistics():
    now = datetime(2024, 3, 5, 12, 0, tzinfo=UTC)
    stats = compute_statistics(SAMPLE, now=now, tz=UTC)
    assert stats.total == 5
    assert stats.active == 3
    assert stats.completed == 2
    # c is overdue; d is overdue but completed; e is unparseable
    assert stats.overdue == 1
    assert stats.to_dict() == {"total": 5, "active": 3, "completed": 2, "overdue": 1}


def test_completed_overdue_reminder_is_not_counted():
    done = reminder("x", due_date="2000-01-01T00:00:00Z", completed=True)
    assert compute_statistics([done]).overdue == 0
    assert compute_statistics([done.model_copy(update={"completed": False})]).overdue == 1


def test_group_by_calendar_day_buckets_and_orders():
    evening = reminder("evening", due_date="2024-03-05T18:00:00Z")
    morning = reminder("morning", due_date="2024-03-05T09:00:00Z")
    other = reminder("other", due_date="2024-03-01T09:00:00Z")
    groups = group_by_calendar_day([evening, reminder("none"), morning, other], tz=UTC)

    assert list(groups) == ["2024-03-01", "2024-03-05"]
    assert ids(groups["2024-03-05"]) == ["morning", "evening"]


def test_unscheduled_collects_empty_and_unparseable():
    assert ids(unscheduled(SAMPLE, tz=UTC)) == ["b", "e"]


def test_group_by_tag_and_untagged():
    tags = [Tag(id="t1", name="Work", color="#111111"), Tag(id="t2", name="Home", color="#222222")]
    items = [
        reminder("a", tag_ids=["t2"]),
        reminder("b", tag_ids=["t2", "t1"]),
        reminder("c"),
        reminder("d", tag_ids=["gone"]),
    ]
    groups, untagged = group_by_tag(items, tags)

    assert [(tag.id, ids(members)) for tag, members in groups] == [("t1", ["b"]), ("t2", ["a", "b"])]
    assert ids(untagged) == ["c", "d"]


def test_resolve_tags_skips_dangling_ids():
    tags = [Tag(id="t1", name="Work", color="#111111")]
    assert [t.id for t in resolve_tags(reminder("a", tag_ids=["gone", "t1"]), tags)] == ["t1"]
