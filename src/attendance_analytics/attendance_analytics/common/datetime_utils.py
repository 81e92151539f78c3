from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator, Optional

from ..core.exceptions import ValidationError

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def parse_hhmm(value: str) -> time:
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
    return time(hour=int(parts[0]), minute=int(parts[1]), second=int(parts[2]) if len(parts) >= 3 else 0)


def now_in(tz: tzinfo) -> datetime:
    """Current time in the operating timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def today_in(tz: tzinfo) -> date:
    return now_in(tz).date()


def to_local(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """Express a stored timestamp in the operating timezone.

    Aware values are converted; naive values are wall-clock time in ``tz``.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def at_time(day: date, at: time, tz: tzinfo) -> datetime:
    return datetime.combine(day, at, tzinfo=tz)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_keys(start: date, end: date) -> list[str]:
    """Calendar months (YYYY-MM) fully or partially inside [start, end]."""
    keys: list[str] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        keys.append(f"{year:04d}-{month:02d}")
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return keys


def month_bounds(key: str) -> tuple[date, date]:
    year, month = (int(p) for p in key.split("-"))
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def clamp_month(key: str, start: date, end: date) -> tuple[date, date]:
    first, last = month_bounds(key)
    return max(first, start), min(last, end)


def previous_month_range(today: date) -> tuple[date, date]:
    last = today.replace(day=1) - timedelta(days=1)
    return last.replace(day=1), last


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def format_hms(seconds_of_day: float) -> str:
    total = int(round(seconds_of_day)) % 86400
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"
