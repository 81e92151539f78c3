from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_in, weekday_name
from . import calculations
from .model import DayOfWeekProfile
from .rules import ShiftRules

logger = logging.getLogger(__name__)


class AnalyticsFormulaService:
    """Read-only analytics over the attendance store.

    Never touches unified metrics, so it is safe to call while a
    recalculation run is in progress.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        rules: ShiftRules,
        fallback_total_employees: int,
        lookback_days: int = 30,
    ):
        self._attendance = attendance
        self._rules = rules
        self._fallback_total_employees = int(fallback_total_employees)
        self._lookback_days = int(lookback_days)

    @property
    def rules(self) -> ShiftRules:
        return self._rules

    def today(self) -> date:
        return now_in(self._rules.tz).date()

    def calculate_tee_metrics(self, reference_date: Optional[date] = None) -> DayOfWeekProfile:
        window_end = reference_date or self.today()
        window_start = window_end - timedelta(days=self._lookback_days)

        counts = self._attendance.count_unique_check_ins_by_date(start_date=window_start, end_date=window_end)
        profile = calculations.weekday_profile(
            counts,
            window_start=window_start,
            window_end=window_end,
            calculated_at=now_in(self._rules.tz),
        )
        logger.info("TEE %s..%s (%d days sampled): %s", window_start, window_end, len(counts), profile.summary)
        return profile

    def _tee_from_profile(self, profile: DayOfWeekProfile, target: date) -> int:
        weekday = profile.for_weekday(target.isoweekday())
        if weekday is None:
            logger.warning(
                "No TEE entry for %s, using fallback of %d employees", target, self._fallback_total_employees
            )
            return self._fallback_total_employees
        return weekday.maximum

    def get_tee_for_date(self, target: date) -> int:
        return self._tee_from_profile(self.calculate_tee_metrics(), target)

    def calculate_attendance_rate(self, present: int, total_expected: int) -> dict:
        return calculations.attendance_rate(present, total_expected)

    def calculate_absentees(self, target: date, actual_unique_check_ins: int) -> dict:
        result = calculations.absentees(self.get_tee_for_date(target), actual_unique_check_ins)
        result["day_of_week"] = weekday_name(target)
        return result

    def count_unique_check_ins(self, target: date) -> int:
        return calculations.unique_check_ins(self._attendance.get_records_for_date(target))

    def calculate_late_arrivals(self, target: date) -> dict:
        return calculations.late_arrivals(self._attendance.get_records_for_date(target), self._rules)

    def calculate_missed_punchouts(self, target: date) -> dict:
        return calculations.missed_punchouts(self._attendance.get_records_for_date(target))

    def calculate_working_hours(self, target: date) -> dict:
        return calculations.working_hours(self._attendance.get_records_for_date(target), self._rules)

    def calculate_department_analytics(self, target: date) -> list[dict]:
        return calculations.department_breakdown(self._attendance.get_department_presence(target))

    def get_comprehensive_analytics(self, target: Optional[date] = None) -> dict:
        target = target or self.today()
        logger.info("Generating comprehensive analytics for %s", target)

        records = self._attendance.get_records_for_date(target)
        profile = self.calculate_tee_metrics()
        tee = self._tee_from_profile(profile, target)

        present = calculations.unique_check_ins(records)
        absentee_calc = calculations.absentees(tee, present)
        absentee_calc["day_of_week"] = weekday_name(target)
        rate = calculations.attendance_rate(present, tee)
        late = calculations.late_arrivals(records, self._rules)
        missed = calculations.missed_punchouts(records)
        hours = calculations.working_hours(records, self._rules)
        early = calculations.early_departures(records, self._rules)
        departments = self.calculate_department_analytics(target)

        return {
            "date": target.isoformat(),
            "tee_metrics": profile.to_dict(),
            "attendance_metrics": {
                "total_employees": tee,
                "present_today": present,
                "absent_today": absentee_calc["absentees"],
                "attendance_rate": rate["rate"],
                "late_arrivals": late["late_count"],
                "early_departures": early,
                "missed_punchouts": missed["missed_count"],
                "overtime_hours": hours["overtime_hours"],
                "average_working_hours": hours["average_hours"],
                "completed_shifts": hours["completed_shifts"],
                "incomplete_shifts": max(0, present - hours["completed_shifts"]),
            },
            "timing_analysis": {
                "on_time_arrivals": max(0, present - late["late_count"]),
                "late_arrivals": late["late_count"],
                "early_departures": early,
                "normal_departures": max(0, hours["completed_shifts"] - early),
                "average_arrival_time": calculations.average_clock_time((r.check_in for r in records), self._rules),
                "average_departure_time": calculations.average_clock_time(
                    (r.check_out for r in records), self._rules
                ),
                "grace_period_violations": late["grace_violations"],
            },
            "department_breakdown": departments,
            "formulas": [
                absentee_calc["formula"],
                rate["formula"],
                late["formula"],
                missed["formula"],
                hours["formula"],
            ],
        }
