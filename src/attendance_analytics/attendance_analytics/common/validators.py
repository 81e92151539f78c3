from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..core.exceptions import ValidationError


def require_date_range(start: date, end: date, *, max_days: int) -> tuple[date, date]:
    if start > end:
        raise ValidationError(f"start_date {start} is after end_date {end}")
    if (end - start).days + 1 > max_days:
        raise ValidationError(f"Date range exceeds {max_days} days")
    return start, end


def normalize_filter(values: Optional[Iterable[str] | str]) -> Optional[list[str]]:
    """Trim, de-duplicate and drop blanks; an empty filter means "no filter"."""
    if values is None:
        return None
    if isinstance(values, str):
        values = values.split(",")
    out: list[str] = []
    for v in values:
        v = str(v).strip()
        if v and v not in out:
            out.append(v)
    return out or None


def require_non_negative_int(value: Optional[str], field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer") from None
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number
