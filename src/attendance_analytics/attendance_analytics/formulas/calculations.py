"""Attendance formulas as pure functions.

Each result is a plain dict carrying a ``formula`` string so dashboards and
audits can show how a number was produced.
"""
from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord, DepartmentPresence
from ..common.datetime_utils import format_hms
from .model import DayOfWeekProfile, WeekdayAttendance
from .rules import ShiftRules


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def weekday_profile(
    unique_check_ins_by_date: Mapping[date, int],
    *,
    window_start: date,
    window_end: date,
    calculated_at: datetime,
) -> DayOfWeekProfile:
    """AA (rounded mean) and MA (max) of daily unique check-ins per weekday."""
    by_weekday: dict[int, list[int]] = defaultdict(list)
    for day, count in unique_check_ins_by_date.items():
        if window_start <= day <= window_end:
            by_weekday[day.isoweekday()].append(int(count))

    weekdays = []
    for iso_weekday in range(1, 8):
        counts = by_weekday.get(iso_weekday, [])
        if counts:
            average = int(round_half_up(sum(counts) / len(counts)))
            maximum = max(counts)
        else:
            average = maximum = 0
        weekdays.append(
            WeekdayAttendance(iso_weekday=iso_weekday, average=average, maximum=maximum, sample_days=len(counts))
        )

    return DayOfWeekProfile(
        weekdays=tuple(weekdays),
        window_start=window_start,
        window_end=window_end,
        calculated_at=calculated_at,
    )


def attendance_rate(present: int, total_expected: int) -> dict:
    rate = int(round_half_up(present / total_expected * 100)) if total_expected > 0 else 0
    rate = min(100, max(0, rate))
    return {
        "rate": rate,
        "formula": f"AttendanceRate = ({present} / {total_expected}) * 100 = {rate}%",
    }


def absentees(tee_expected: int, actual_unique_check_ins: int) -> dict:
    count = max(0, tee_expected - actual_unique_check_ins)
    return {
        "tee_expected": tee_expected,
        "absentees": count,
        "formula": f"Absentees = TEE({tee_expected}) - UniquePunchIns({actual_unique_check_ins}) = {count}",
    }


def unique_check_ins(records: Iterable[AttendanceRecord]) -> int:
    return len({r.employee_code for r in records if r.has_check_in})


def late_arrivals(records: Sequence[AttendanceRecord], rules: ShiftRules) -> dict:
    late_count = sum(1 for r in records if rules.is_late(r.check_in))
    grace_violations = sum(1 for r in records if rules.is_grace_violation(r.check_in))
    return {
        "late_count": late_count,
        "grace_violations": grace_violations,
        "formula": f"LateArrivals = COUNT(checkIn > {rules.describe_late_cutoff()}) = {late_count}",
    }


def early_departures(records: Sequence[AttendanceRecord], rules: ShiftRules) -> int:
    return sum(1 for r in records if r.has_check_in and rules.is_early_departure(r.check_out))


def missed_punchouts(records: Sequence[AttendanceRecord]) -> dict:
    missed = sum(1 for r in records if r.has_check_in and r.check_out is None)
    return {
        "missed_count": missed,
        "formula": f"MissedPunchouts = COUNT(checkIn IS NOT NULL AND checkOut IS NULL) = {missed}",
    }


def working_hours(records: Sequence[AttendanceRecord], rules: ShiftRules) -> dict:
    standard = rules.standard_hours
    total = 0.0
    overtime = 0.0
    completed = 0
    for r in records:
        hours = rules.hours_for(r).total
        total += hours
        overtime += max(0.0, hours - standard)
        if r.is_complete:
            completed += 1

    total = round(total, 2)
    overtime = round(overtime, 2)
    average = round_half_up(total / completed, 1) if completed > 0 else 0
    return {
        "total_hours": total,
        "average_hours": average,
        "overtime_hours": overtime,
        "completed_shifts": completed,
        "formula": (
            f"AvgHours = {total}hrs / {completed}completed = {average}hrs, "
            f"Overtime = SUM(hours > {standard:g}) = {overtime}hrs"
        ),
    }


def department_breakdown(presence: Iterable[DepartmentPresence]) -> list[dict]:
    out = []
    for p in presence:
        name = p.department or "Unknown"
        rate = attendance_rate(p.present_employees, p.total_employees)["rate"]
        out.append(
            {
                "department": name,
                "total_employees": p.total_employees,
                "present_employees": p.present_employees,
                "attendance_rate": rate,
                "formula": f"{name}: ({p.present_employees}/{p.total_employees}) * 100 = {rate}%",
            }
        )
    return out


def average_clock_time(values: Iterable[Optional[datetime]], rules: ShiftRules) -> Optional[str]:
    seconds = []
    for v in values:
        local = rules.local(v)
        if local is not None:
            seconds.append(local.hour * 3600 + local.minute * 60 + local.second)
    if not seconds:
        return None
    return format_hms(sum(seconds) / len(seconds))
