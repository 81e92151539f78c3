from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from src.attendance_analytics.attendance_analytics.attendance.model import AttendanceRecord
from src.attendance_analytics.attendance_analytics.core.settings import AnalyticsSettings
from src.attendance_analytics.attendance_analytics.formulas.rules import HoursBreakdown, ShiftRules

TZ = ZoneInfo("Asia/Karachi")


def test_aware_utc_check_in_is_judged_in_local_time():
    rules = ShiftRules(tz=TZ)
    # 04:20 UTC is 09:20 in Karachi (UTC+5)
    assert not rules.is_late(datetime(2025, 6, 2, 4, 20, tzinfo=timezone.utc))
    # 04:45 UTC is 09:45 local
    assert rules.is_late(datetime(2025, 6, 2, 4, 45, tzinfo=timezone.utc))


def test_naive_timestamps_are_local_wall_clock():
    rules = ShiftRules(tz=TZ)
    assert rules.is_late(datetime(2025, 6, 2, 9, 31))
    assert not rules.is_late(datetime(2025, 6, 2, 9, 30))
    assert not rules.is_late(None)


def test_early_departure_before_end_of_day():
    rules = ShiftRules(tz=TZ)
    assert rules.is_early_departure(datetime(2025, 6, 2, 17, 59))
    assert not rules.is_early_departure(datetime(2025, 6, 2, 18, 0))
    assert not rules.is_early_departure(None)


def test_hours_for_incomplete_record_is_zero():
    rules = ShiftRules(tz=TZ)
    record = AttendanceRecord("E1", date(2025, 6, 2), datetime(2025, 6, 2, 9, 0), None)
    assert rules.hours_for(record) == HoursBreakdown()


def test_hours_for_derived_split_at_standard_hours():
    rules = ShiftRules(tz=TZ)
    record = AttendanceRecord("E1", date(2025, 6, 2), datetime(2025, 6, 2, 8, 0), datetime(2025, 6, 2, 18, 15))
    assert rules.hours_for(record) == HoursBreakdown(total=10.25, regular=8.0, overtime=2.25)


def test_hours_for_precomputed_total_without_split():
    rules = ShiftRules(tz=TZ)
    record = AttendanceRecord("E1", date(2025, 6, 2), datetime(2025, 6, 2, 9, 0), None, total_hours=6.5)
    assert rules.hours_for(record) == HoursBreakdown(total=6.5, regular=0.0, overtime=0.0)


def test_from_settings_reads_configured_shift():
    settings = AnalyticsSettings(
        timezone="UTC", standard_start_time=time(8, 0), grace_minutes=15, standard_end_time=time(17, 0)
    )
    rules = ShiftRules.from_settings(settings)
    assert rules.late_cutoff(date(2025, 6, 2)).time() == time(8, 15)
    assert rules.is_late(datetime(2025, 6, 2, 8, 16, tzinfo=timezone.utc))
    assert rules.describe_late_cutoff() == "'08:00:00' + 15min grace"
