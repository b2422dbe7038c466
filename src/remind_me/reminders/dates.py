"""
期限日時のパースと表示用ユーティリティ

受け付ける形式は2種類のみ:
  (a) RFC 3339（タイムゾーンオフセット付き）  例: 2024-03-05T09:00:00Z
  (b) オフセットなしの分精度ローカル時刻      例: 2024-03-05T09:00

(a)を優先し、失敗したら(b)を端末ローカルタイムゾーンの壁時計時刻として解釈する。
どちらでもなければ「不明」とし、例外は送出しない。
"""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"
LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"
DAY_KEY_FORMAT = "%Y-%m-%d"

# Sort key for empty/unparseable due dates
MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc)

_RFC3339_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)
_LOCAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")


def _parse_rfc3339(value: str) -> Optional[datetime]:
    match = _RFC3339_RE.match(value)
    if not match:
        return None
    # fromisoformat only takes up to microseconds
    frac = (match.group("frac") or "")[:6]
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    time = match.group("time")
    if time.endswith(":60"):
        # leap second
        time = time[:-2] + "59"
    text = f"{match.group('date')}T{time}"
    if frac:
        text += "." + frac.ljust(6, "0")
    try:
        return datetime.fromisoformat(text + offset)
    except ValueError:
        return None


def _parse_local(value: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    if not _LOCAL_RE.match(value):
        return None
    try:
        naive = datetime.strptime(value, LOCAL_INPUT_FORMAT)
    except ValueError:
        return None
    if tz is not None:
        return naive.replace(tzinfo=tz)
    try:
        return naive.astimezone()
    except (OverflowError, OSError, ValueError):
        return None


def parse_to_instant(value: str, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    期限日時文字列をタイムゾーン付きdatetimeへ変換

    Args:
        value: 期限日時文字列
        tz: (b)形式を解釈するタイムゾーン（省略時は端末ローカル）

    Returns:
        aware datetime、空文字・解釈不能な場合はNone
    """
    if not value:
        return None
    value = value.strip()
    return _parse_rfc3339(value) or _parse_local(value, tz)


def parse_for_sort(value: str, tz: Optional[tzinfo] = None) -> datetime:
    """ソート用キー。解釈不能な日時はMAX_INSTANTとして末尾に並べる"""
    instant = parse_to_instant(value, tz)
    return instant if instant is not None else MAX_INSTANT


def is_overdue(value: str, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> bool:
    """期限が現在時刻より厳密に前ならTrue。空・解釈不能はFalse"""
    instant = parse_to_instant(value, tz)
    if instant is None:
        return False
    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.astimezone()
    return instant < current


def _local(instant: datetime, tz: Optional[tzinfo]) -> datetime:
    try:
        return instant.astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return instant


def format_for_display(value: str, tz: Optional[tzinfo] = None) -> str:
    """"YYYY-MM-DD HH:MM" 形式で返す。解釈不能な値はそのまま返す

    (a)形式は記録されたオフセットの壁時計時刻、(b)形式は入力どおりの時刻で表示する。
    """
    instant = parse_to_instant(value, tz)
    if instant is None:
        return value
    return instant.strftime(DISPLAY_FORMAT)


def to_editable_local_value(value: str, tz: Optional[tzinfo] = None) -> str:
    """編集フォーム用に "YYYY-MM-DDTHH:MM"（ローカル時刻）へ変換。解釈不能な値はそのまま返す"""
    instant = parse_to_instant(value, tz)
    if instant is None:
        return value
    return _local(instant, tz).strftime(LOCAL_INPUT_FORMAT)


def extract_calendar_day_key(value: str, tz: Optional[tzinfo] = None) -> Optional[str]:
    """ローカル時刻での "YYYY-MM-DD"。空・解釈不能はNone"""
    instant = parse_to_instant(value, tz)
    if instant is None:
        return None
    return _local(instant, tz).strftime(DAY_KEY_FORMAT)


def to_rfc3339(value: str, tz: Optional[tzinfo] = None) -> str:
    """(b)形式の入力をUTCのRFC 3339へ変換。それ以外はそのまま返す"""
    if not value:
        return ""
    instant = _parse_local(value.strip(), tz)
    if instant is None:
        return value
    return instant.astimezone(timezone.utc).isoformat()


def now_rfc3339() -> str:
    """現在時刻（UTC）のRFC 3339文字列"""
    return datetime.now(timezone.utc).isoformat()


def now_timestamp_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
