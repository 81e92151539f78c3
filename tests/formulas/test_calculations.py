from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from src.attendance_analytics.attendance_analytics.attendance.model import AttendanceRecord, DepartmentPresence
from src.attendance_analytics.attendance_analytics.formulas import calculations
from src.attendance_analytics.attendance_analytics.formulas.rules import ShiftRules

TZ = ZoneInfo("Asia/Karachi")
DAY = date(2025, 6, 2)


def rec(code: str, check_in: str | None, check_out: str | None = None, **kwargs) -> AttendanceRecord:
    def at(hhmm):
        if hhmm is None:
            return None
        h, m = (int(p) for p in hhmm.split(":"))
        return datetime(DAY.year, DAY.month, DAY.day, h, m)

    return AttendanceRecord(employee_code=code, work_date=DAY, check_in=at(check_in), check_out=at(check_out), **kwargs)


@pytest.fixture
def rules() -> ShiftRules:
    return ShiftRules(tz=TZ)


def test_round_half_up_rounds_halves_away_from_zero():
    assert calculations.round_half_up(2.5) == 3
    assert calculations.round_half_up(298.75) == 299
    assert calculations.round_half_up(0.125, 2) == 0.13


def test_monday_profile_averages_and_maximum():
    window_end = date(2025, 6, 30)
    counts = {
        date(2025, 6, 2): 290,
        date(2025, 6, 9): 310,
        date(2025, 6, 16): 295,
        date(2025, 6, 23): 300,
        date(2025, 6, 3): 280,
    }
    profile = calculations.weekday_profile(
        counts,
        window_start=window_end - timedelta(days=30),
        window_end=window_end,
        calculated_at=datetime(2025, 6, 30, 10, 0, tzinfo=TZ),
    )

    monday = profile.for_weekday(1)
    assert (monday.average, monday.maximum, monday.sample_days) == (299, 310, 4)
    assert profile.for_weekday(2).maximum == 280
    assert profile.for_weekday(7).sample_days == 0

    data = profile.to_dict()
    assert data["aa1_monday_avg"] == 299
    assert data["ma1_monday_max"] == 310
    assert data["ma7_sunday_max"] == 0
    assert "AA1:299" in data["summary"] and "MA1:310" in data["summary"]


def test_profile_ignores_days_outside_the_window():
    profile = calculations.weekday_profile(
        {date(2025, 4, 7): 999, date(2025, 6, 9): 10},
        window_start=date(2025, 5, 31),
        window_end=date(2025, 6, 30),
        calculated_at=datetime(2025, 6, 30, tzinfo=TZ),
    )
    assert profile.for_weekday(1).maximum == 10


@pytest.mark.parametrize(
    "present,total,expected",
    [(150, 300, 50), (1, 3, 33), (2, 3, 67), (0, 0, 0), (5, -1, 0), (300, 300, 100), (6, 5, 100)],
)
def test_attendance_rate(present, total, expected):
    result = calculations.attendance_rate(present, total)
    assert result["rate"] == expected
    assert f"({present} / {total})" in result["formula"]


def test_absentees_never_negative():
    assert calculations.absentees(310, 295)["absentees"] == 15
    over = calculations.absentees(310, 320)
    assert over["absentees"] == 0
    assert over["tee_expected"] == 310
    assert over["formula"] == "Absentees = TEE(310) - UniquePunchIns(320) = 0"


def test_unique_check_ins_counts_distinct_employees():
    records = [rec("E1", "09:00"), rec("E1", "13:00"), rec("E2", "10:00"), rec("E3", None)]
    assert calculations.unique_check_ins(records) == 2


def test_late_arrivals_use_start_plus_grace(rules):
    records = [rec("E1", "09:30"), rec("E2", "09:31"), rec("E3", "10:15"), rec("E4", None)]
    result = calculations.late_arrivals(records, rules)
    assert result["late_count"] == 2
    assert result["grace_violations"] == 2
    assert "'09:00:00' + 30min grace" in result["formula"]


def test_grace_violations_honour_the_extra_margin():
    rules = ShiftRules(tz=TZ, grace_violation_margin_minutes=30)
    result = calculations.late_arrivals([rec("E1", "09:45"), rec("E2", "10:01")], rules)
    assert result["late_count"] == 2
    assert result["grace_violations"] == 1


def test_missed_punchouts():
    records = [rec("E1", "09:00", "18:00"), rec("E2", "09:00"), rec("E3", None)]
    assert calculations.missed_punchouts(records)["missed_count"] == 1


def test_early_departures_only_count_checked_in_records(rules):
    records = [rec("E1", "09:00", "17:00"), rec("E2", "09:00", "18:00"), rec("E3", "09:00")]
    assert calculations.early_departures(records, rules) == 1


def test_working_hours_from_timestamps(rules):
    records = [rec("E1", "09:00", "18:30"), rec("E2", "09:00", "17:00"), rec("E3", "09:00")]
    result = calculations.working_hours(records, rules)
    assert result["total_hours"] == 17.5
    assert result["completed_shifts"] == 2
    assert result["average_hours"] == 8.8
    assert result["overtime_hours"] == 1.5


def test_working_hours_prefer_precomputed_totals(rules):
    records = [rec("E1", "09:00", "18:00", total_hours=10.0, regular_hours=8.0, overtime_hours=2.0)]
    result = calculations.working_hours(records, rules)
    assert result["total_hours"] == 10.0
    assert result["overtime_hours"] == 2.0


def test_working_hours_without_completed_shifts(rules):
    result = calculations.working_hours([rec("E1", "09:00")], rules)
    assert result["average_hours"] == 0
    assert result["completed_shifts"] == 0


def test_department_breakdown_names_missing_department_unknown():
    rows = calculations.department_breakdown(
        [DepartmentPresence("IT", 10, 9), DepartmentPresence(None, 4, 1), DepartmentPresence("Empty", 0, 0)]
    )
    assert [r["department"] for r in rows] == ["IT", "Unknown", "Empty"]
    assert [r["attendance_rate"] for r in rows] == [90, 25, 0]
    assert rows[0]["formula"] == "IT: (9/10) * 100 = 90%"


def test_average_clock_time(rules):
    assert calculations.average_clock_time([datetime(2025, 6, 2, 9, 0), datetime(2025, 6, 2, 10, 0), None], rules) == "09:30:00"
    assert calculations.average_clock_time([None], rules) is None
