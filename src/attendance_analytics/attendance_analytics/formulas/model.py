from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.datetime_utils import WEEKDAY_NAMES


@dataclass(frozen=True)
class WeekdayAttendance:
    """AA/MA pair for one ISO weekday (1=Monday .. 7=Sunday)."""

    iso_weekday: int
    average: int
    maximum: int
    sample_days: int

    @property
    def name(self) -> str:
        return WEEKDAY_NAMES[self.iso_weekday - 1]


@dataclass(frozen=True)
class DayOfWeekProfile:
    """TEE metrics: AA1..AA7 and MA1..MA7 over a trailing window."""

    weekdays: tuple[WeekdayAttendance, ...]
    window_start: date
    window_end: date
    calculated_at: datetime

    def for_weekday(self, iso_weekday: int) -> WeekdayAttendance | None:
        for w in self.weekdays:
            if w.iso_weekday == iso_weekday:
                return w
        return None

    @property
    def summary(self) -> str:
        aa = " ".join(f"AA{w.iso_weekday}:{w.average}" for w in self.weekdays)
        ma = " ".join(f"MA{w.iso_weekday}:{w.maximum}" for w in self.weekdays)
        return f"{aa}, {ma}"

    def to_dict(self) -> dict:
        out: dict = {}
        for w in self.weekdays:
            out[f"aa{w.iso_weekday}_{w.name.lower()}_avg"] = w.average
        for w in self.weekdays:
            out[f"ma{w.iso_weekday}_{w.name.lower()}_max"] = w.maximum
        out["weekdays"] = [
            {
                "weekday": w.name,
                "average": w.average,
                "maximum": w.maximum,
                "sample_days": w.sample_days,
            }
            for w in self.weekdays
        ]
        out["window"] = {"start": self.window_start.isoformat(), "end": self.window_end.isoformat()}
        out["calculated_at"] = self.calculated_at.isoformat()
        out["summary"] = self.summary
        return out
