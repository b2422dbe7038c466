"""Month grid helpers for the calendar view."""

from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..i18n.locale import Locale
from .models import Reminder

_EN_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(slots=True, frozen=True)
class CalendarDay:
    """One cell of the month grid; blank leading cells have ``in_month=False``."""

    in_month: bool
    day: int
    date_key: str
    count: int

    def to_dict(self) -> dict:
        return {
            "in_month": self.in_month,
            "day": self.day,
            "date_key": self.date_key,
            "count": self.count,
        }


def days_in_month(year: int, month: int) -> int:
    return _calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, counting Sunday as 0."""
    # calendar.weekday: Monday == 0
    return (_calendar.weekday(year, month, 1) + 1) % 7


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def today(tz: Optional[tzinfo] = None) -> Tuple[int, int, int]:
    now = datetime.now(timezone.utc).astimezone(tz)
    return now.year, now.month, now.day


def today_key(tz: Optional[tzinfo] = None) -> str:
    year, month, day = today(tz)
    return f"{year:04d}-{month:02d}-{day:02d}"


def month_grid(
    year: int, month: int, buckets: Optional[Mapping[str, Sequence[Reminder]]] = None
) -> List[CalendarDay]:
    """Leading blanks up to the first weekday, then one cell per day with its reminder count."""
    buckets = buckets or {}
    cells = [CalendarDay(False, 0, "", 0) for _ in range(first_weekday(year, month))]
    for day in range(1, days_in_month(year, month) + 1):
        key = f"{year:04d}-{month:02d}-{day:02d}"
        cells.append(CalendarDay(True, day, key, len(buckets.get(key, ()))))
    return cells


def format_month_year(year: int, month: int, locale: Locale = Locale.EN) -> str:
    if not locale.is_chinese:
        return f"{_EN_MONTHS[month - 1]} {year}"
    return f"{year}年{month}月"


def parse_month(value: str) -> Optional[Tuple[int, int]]:
    """"YYYY-MM" -> (year, month); None when malformed."""
    try:
        year_text, month_text = value.split("-", 1)
        year, month = int(year_text), int(month_text)
    except (AttributeError, ValueError):
        return None
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return None
    return year, month


def month_summary(year: int, month: int, buckets: Dict[str, List[Reminder]]) -> Dict[str, List[Reminder]]:
    """The subset of day buckets that fall inside the given month."""
    prefix = f"{year:04d}-{month:02d}-"
    return {key: items for key, items in buckets.items() if key.startswith(prefix)}
