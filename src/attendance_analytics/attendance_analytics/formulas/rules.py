from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import at_time, to_local
from ..core.settings import AnalyticsSettings


@dataclass(frozen=True)
class HoursBreakdown:
    total: float = 0.0
    regular: float = 0.0
    overtime: float = 0.0


@dataclass(frozen=True)
class ShiftRules:
    """Working-day thresholds shared by the formulas and the day calculator.

    Late and grace-violation are separate predicates: a check-in is late after
    start + grace, and a grace violation after start + grace + margin. With
    the default margin of 0 both count the same check-ins.
    """

    tz: tzinfo
    start_time: time = time(9, 0)
    grace_minutes: int = 30
    grace_violation_margin_minutes: int = 0
    end_time: time = time(18, 0)
    standard_hours: float = 8.0

    @classmethod
    def from_settings(cls, settings: AnalyticsSettings) -> "ShiftRules":
        return cls(
            tz=settings.tzinfo,
            start_time=settings.standard_start_time,
            grace_minutes=settings.grace_minutes,
            grace_violation_margin_minutes=settings.grace_violation_margin_minutes,
            end_time=settings.standard_end_time,
            standard_hours=settings.standard_work_hours,
        )

    def local(self, value: Optional[datetime]) -> Optional[datetime]:
        return to_local(value, self.tz)

    def late_cutoff(self, day: date) -> datetime:
        return at_time(day, self.start_time, self.tz) + timedelta(minutes=self.grace_minutes)

    def grace_violation_cutoff(self, day: date) -> datetime:
        return self.late_cutoff(day) + timedelta(minutes=self.grace_violation_margin_minutes)

    def departure_cutoff(self, day: date) -> datetime:
        return at_time(day, self.end_time, self.tz)

    def is_late(self, check_in: Optional[datetime]) -> bool:
        local = self.local(check_in)
        return local is not None and local > self.late_cutoff(local.date())

    def is_grace_violation(self, check_in: Optional[datetime]) -> bool:
        local = self.local(check_in)
        return local is not None and local > self.grace_violation_cutoff(local.date())

    def is_early_departure(self, check_out: Optional[datetime]) -> bool:
        local = self.local(check_out)
        return local is not None and local < self.departure_cutoff(local.date())

    def hours_for(self, record: AttendanceRecord) -> HoursBreakdown:
        """Hours worked on a record.

        Precomputed upstream hours win. Without them, a complete record is
        measured from its timestamps and split at ``standard_hours``.
        """
        if record.total_hours is not None:
            return HoursBreakdown(
                total=float(record.total_hours),
                regular=float(record.regular_hours or 0),
                overtime=float(record.overtime_hours or 0),
            )
        if not record.is_complete:
            return HoursBreakdown()

        seconds = (self.local(record.check_out) - self.local(record.check_in)).total_seconds()
        total = round(max(seconds, 0) / 3600, 2)
        regular = round(min(total, self.standard_hours), 2)
        overtime = round(max(total - self.standard_hours, 0), 2)
        return HoursBreakdown(total=total, regular=regular, overtime=overtime)

    def describe_late_cutoff(self) -> str:
        return f"'{self.start_time.strftime('%H:%M:%S')}' + {self.grace_minutes}min grace"
