from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.attendance_analytics.attendance_analytics.attendance.model import AttendanceRecord, DepartmentPresence
from src.attendance_analytics.attendance_analytics.formulas import service as formula_service_module
from src.attendance_analytics.attendance_analytics.formulas.rules import ShiftRules
from src.attendance_analytics.attendance_analytics.formulas.service import AnalyticsFormulaService
from tests.fakes import InMemoryAttendance

TZ = ZoneInfo("Asia/Karachi")
NOW = datetime(2025, 6, 30, 10, 0, tzinfo=TZ)  # a Monday

MONDAY_COUNTS = {
    date(2025, 6, 2): 290,
    date(2025, 6, 9): 310,
    date(2025, 6, 16): 295,
    date(2025, 6, 23): 300,
}


@pytest.fixture(autouse=True)
def frozen_now(monkeypatch):
    monkeypatch.setattr(formula_service_module, "now_in", lambda tz: NOW.astimezone(tz))


def make_service(attendance: InMemoryAttendance, fallback: int = 293) -> AnalyticsFormulaService:
    return AnalyticsFormulaService(
        attendance, rules=ShiftRules(tz=TZ), fallback_total_employees=fallback, lookback_days=30
    )


def test_today_uses_operating_timezone():
    assert make_service(InMemoryAttendance()).today() == date(2025, 6, 30)


def test_tee_metrics_window_ends_at_reference_date():
    profile = make_service(InMemoryAttendance(unique_counts=MONDAY_COUNTS)).calculate_tee_metrics()
    assert profile.window_start == date(2025, 5, 31)
    assert profile.window_end == date(2025, 6, 30)
    assert profile.for_weekday(1).average == 299
    assert profile.for_weekday(1).maximum == 310


def test_tee_metrics_for_an_older_reference_date():
    service = make_service(InMemoryAttendance(unique_counts=MONDAY_COUNTS))
    profile = service.calculate_tee_metrics(date(2025, 6, 10))
    # Only 2025-06-02 and 2025-06-09 fall in [2025-05-11, 2025-06-10].
    assert profile.for_weekday(1).maximum == 310
    assert profile.for_weekday(1).sample_days == 2


def test_tee_for_any_monday_is_the_monday_maximum():
    service = make_service(InMemoryAttendance(unique_counts=MONDAY_COUNTS))
    assert service.get_tee_for_date(date(2025, 7, 7)) == 310


def test_absentees_include_weekday_name_and_floor_at_zero():
    service = make_service(InMemoryAttendance(unique_counts=MONDAY_COUNTS))
    result = service.calculate_absentees(date(2025, 7, 7), 300)
    assert result["absentees"] == 10
    assert result["day_of_week"] == "Monday"
    assert service.calculate_absentees(date(2025, 7, 7), 400)["absentees"] == 0


def test_late_arrivals_convert_aware_timestamps_to_local_time():
    day = date(2025, 6, 30)
    records = [
        # 09:20 and 09:45 in Karachi
        AttendanceRecord("E1", day, datetime(2025, 6, 30, 4, 20, tzinfo=timezone.utc), None),
        AttendanceRecord("E2", day, datetime(2025, 6, 30, 4, 45, tzinfo=timezone.utc), None),
    ]
    result = make_service(InMemoryAttendance(records)).calculate_late_arrivals(day)
    assert result["late_count"] == 1


def test_department_analytics_reads_presence():
    day = date(2025, 6, 30)
    attendance = InMemoryAttendance(presence={day: [DepartmentPresence("HR", 8, 6)]})
    rows = make_service(attendance).calculate_department_analytics(day)
    assert rows == [
        {
            "department": "HR",
            "total_employees": 8,
            "present_employees": 6,
            "attendance_rate": 75,
            "formula": "HR: (6/8) * 100 = 75%",
        }
    ]


def test_comprehensive_analytics_for_a_day():
    day = date(2025, 6, 30)
    at = lambda h, m: datetime(2025, 6, 30, h, m)  # noqa: E731
    records = [
        AttendanceRecord("E1", day, at(9, 0), at(18, 0), department="IT"),
        AttendanceRecord("E2", day, at(9, 45), at(17, 0), department="IT"),
        AttendanceRecord("E3", day, at(10, 0), None, department="HR"),
        AttendanceRecord("E4", day, None, None, department="HR"),
    ]
    attendance = InMemoryAttendance(
        records,
        unique_counts={date(2025, 6, 23): 4},
        presence={day: [DepartmentPresence("HR", 2, 1), DepartmentPresence("IT", 2, 2)]},
    )
    report = make_service(attendance).get_comprehensive_analytics(day)

    metrics = report["attendance_metrics"]
    assert report["date"] == "2025-06-30"
    assert metrics["total_employees"] == 4
    assert metrics["present_today"] == 3
    assert metrics["absent_today"] == 1
    assert metrics["attendance_rate"] == 75
    assert metrics["late_arrivals"] == 2
    assert metrics["early_departures"] == 1
    assert metrics["missed_punchouts"] == 1
    assert metrics["completed_shifts"] == 2
    assert metrics["incomplete_shifts"] == 1

    timing = report["timing_analysis"]
    assert timing["on_time_arrivals"] == 1
    assert timing["normal_departures"] == 1
    assert timing["grace_period_violations"] == 2
    assert timing["average_arrival_time"] == "09:35:00"

    assert [d["department"] for d in report["department_breakdown"]] == ["HR", "IT"]
    assert report["tee_metrics"]["ma1_monday_max"] == 4
    assert len(report["formulas"]) == 5


def test_comprehensive_analytics_defaults_to_today():
    report = make_service(InMemoryAttendance()).get_comprehensive_analytics()
    assert report["date"] == "2025-06-30"
    assert report["attendance_metrics"]["attendance_rate"] == 0
    assert report["timing_analysis"]["average_arrival_time"] is None


def test_comprehensive_rate_is_capped_when_more_check_in_than_expected():
    day = date(2025, 6, 30)
    records = [AttendanceRecord(f"E{i}", day, datetime(2025, 6, 30, 9, 0), None) for i in range(6)]
    attendance = InMemoryAttendance(records, unique_counts={date(2025, 6, 23): 5})

    metrics = make_service(attendance).get_comprehensive_analytics(day)["attendance_metrics"]
    assert metrics["total_employees"] == 5
    assert metrics["present_today"] == 6
    assert metrics["attendance_rate"] == 100
    assert metrics["absent_today"] == 0
