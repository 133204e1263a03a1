from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def parse_date(value: object) -> date:
    """Parse a calendar date from a date, datetime or ISO string. Raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Not a date: {value!r}")
    text = value.strip()
    # Store timestamps may carry a time component ("2025-03-01T00:00:00Z").
    if len(text) > 10 and text[10] in ("T", " "):
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Enumerate the half-open window [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def occupies(check_in: date, check_out: date, day: date) -> bool:
    """A stay occupies `day` iff check_in <= day < check_out; departure day is free."""
    return check_in <= day < check_out


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    return a_start < b_end and b_start < a_end


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def window_for_anchor(anchor: date) -> tuple[date, date]:
    """Visible window starting at `anchor`, as many days long as the anchor's month."""
    return anchor, anchor + timedelta(days=days_in_month(anchor))


def month_start(value: date) -> date:
    return value.replace(day=1)


def shift_month(anchor: date, delta: int) -> date:
    """Move the anchor by `delta` months, clamping the day to the target month's length."""
    month_index = anchor.year * 12 + (anchor.month - 1) + delta
    year, month = divmod(month_index, 12)
    month += 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def is_weekend(value: date) -> bool:
    return value.weekday() >= 5


def today_in(timezone: str) -> date:
    """Current calendar date in the named timezone (UTC if the name is unknown)."""
    return datetime.now(_safe_timezone(timezone)).date()


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")
