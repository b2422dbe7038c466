"""期限日時ユーティリティのテスト"""

from datetime import datetime, timedelta, timezone

import pytest

from remind_me.reminders.dates import (
    MAX_INSTANT,
    extract_calendar_day_key,
    format_for_display,
    is_overdue,
    parse_for_sort,
    parse_to_instant,
    to_editable_local_value,
    to_rfc3339,
)

UTC = timezone.utc
JST = timezone(timedelta(hours=9))


def test_parse_rfc3339_with_zulu():
    assert parse_to_instant("2024-03-05T09:00:00Z") == datetime(2024, 3, 5, 9, 0, tzinfo=UTC)


def test_parse_rfc3339_with_offset_and_long_fraction():
    instant = parse_to_instant("2024-03-05T09:00:00.123456789+09:00")
    assert instant == datetime(2024, 3, 5, 0, 0, 0, 123456, tzinfo=UTC)


def test_parse_rfc3339_leap_second_is_clamped():
    assert parse_to_instant("2016-12-31T23:59:60Z") == datetime(2016, 12, 31, 23, 59, 59, tzinfo=UTC)
    assert parse_to_instant("2016-12-31T23:59:60.5+00:00") == datetime(2016, 12, 31, 23, 59, 59, 500000, tzinfo=UTC)


def test_parse_local_shape_uses_given_zone():
    assert parse_to_instant("2024-03-05T09:00", JST) == datetime(2024, 3, 5, 0, 0, tzinfo=UTC)


def test_parse_local_shape_defaults_to_system_zone():
    instant = parse_to_instant("2024-03-05T09:00")
    assert instant is not None
    assert instant.tzinfo is not None
    assert instant.astimezone().replace(tzinfo=None) == datetime(2024, 3, 5, 9, 0)


@pytest.mark.parametrize(
    "value",
    ["", "   ", "tomorrow", "2024-03-05", "2024-03-05T09", "2024-13-05T09:00", "2024-03-05T09:00:00"],
)
def test_unparseable_values_return_none(value):
    assert parse_to_instant(value, UTC) is None


def test_parse_for_sort_puts_unknown_last():
    assert parse_for_sort("", UTC) == MAX_INSTANT
    assert parse_for_sort("2999-01-01T00:00:00Z") < MAX_INSTANT


def test_is_overdue_for_past_instant():
    assert is_overdue("2000-01-01T00:00:00Z") is True


def test_is_overdue_false_for_future_empty_and_garbage():
    assert is_overdue("2999-01-01T00:00:00Z") is False
    assert is_overdue("") is False
    assert is_overdue("not a date") is False


def test_is_overdue_is_strictly_before_now():
    now = datetime(2024, 1, 1, tzinfo=UTC)
    assert is_overdue("2024-01-01T00:00:00Z", now=now) is False
    assert is_overdue("2023-12-31T23:59:59Z", now=now) is True


def test_is_overdue_for_local_shape():
    now = datetime(2024, 3, 5, 1, 0, tzinfo=UTC)
    # 09:00 JST == 00:00 UTC
    assert is_overdue("2024-03-05T09:00", now=now, tz=JST) is True
    assert is_overdue("2024-03-05T11:00", now=now, tz=JST) is False


def test_format_for_display():
    assert format_for_display("2024-03-05T09:00:00+09:00") == "2024-03-05 09:00"
    assert format_for_display("2024-03-05T09:30", UTC) == "2024-03-05 09:30"


def test_format_for_display_passes_unparseable_through():
    assert format_for_display("") == ""
    assert format_for_display("someday") == "someday"


def test_to_editable_local_value():
    assert to_editable_local_value("2024-03-05T09:00:00Z", UTC) == "2024-03-05T09:00"
    assert to_editable_local_value("2024-03-05T09:00:00Z", JST) == "2024-03-05T18:00"
    assert to_editable_local_value("2024-03-05T09:00", UTC) == "2024-03-05T09:00"
    assert to_editable_local_value("garbage") == "garbage"


def test_extract_calendar_day_key_uses_local_day():
    assert extract_calendar_day_key("2024-03-05T23:30:00Z", UTC) == "2024-03-05"
    assert extract_calendar_day_key("2024-03-05T23:30:00Z", JST) == "2024-03-06"
    assert extract_calendar_day_key("", UTC) is None
    assert extract_calendar_day_key("2024-03-05", UTC) is None


def test_to_rfc3339_converts_local_shape_only():
    assert to_rfc3339("2024-03-05T09:00", JST) == "2024-03-05T00:00:00+00:00"
    assert to_rfc3339("2024-03-05T09:00:00Z", JST) == "2024-03-05T09:00:00Z"
    assert to_rfc3339("") == ""
    assert to_rfc3339("whenever") == "whenever"
