from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import MetricStatus


@dataclass(frozen=True)
class DayMetrics:
    status: MetricStatus
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    is_late: bool = False
    is_early_departure: bool = False
    break_duration: float = 0.0
    productivity_score: float = 1.0


@dataclass(frozen=True)
class UnifiedAttendanceMetric:
    """Derived row of unified_attendance_metrics, keyed by (work_date, employee_code)."""

    work_date: date
    employee_code: str
    department: Optional[str]
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    status: MetricStatus
    total_hours: float
    regular_hours: float
    overtime_hours: float
    is_late: bool
    is_early_departure: bool
    break_duration: float
    productivity_score: float
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[date, str]:
        return self.work_date, self.employee_code

    @classmethod
    def from_record(cls, record: AttendanceRecord, metrics: DayMetrics) -> "UnifiedAttendanceMetric":
        return cls(
            work_date=record.work_date,
            employee_code=record.employee_code,
            department=record.department,
            check_in=record.check_in,
            check_out=record.check_out,
            status=metrics.status,
            total_hours=metrics.total_hours,
            regular_hours=metrics.regular_hours,
            overtime_hours=metrics.overtime_hours,
            is_late=metrics.is_late,
            is_early_departure=metrics.is_early_departure,
            break_duration=metrics.break_duration,
            productivity_score=metrics.productivity_score,
        )


@dataclass(frozen=True)
class MonthSummary:
    """Aggregate over unified metrics in a date range, logged after each month."""

    total_records: int = 0
    unique_employees: int = 0
    present_count: int = 0
    absent_count: int = 0
    incomplete_count: int = 0
    late_arrivals: int = 0
    average_hours: Optional[float] = None
    total_overtime: float = 0.0
    average_productivity: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "unique_employees": self.unique_employees,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "incomplete_count": self.incomplete_count,
            "late_arrivals": self.late_arrivals,
            "average_hours": self.average_hours,
            "total_overtime": self.total_overtime,
            "average_productivity": self.average_productivity,
        }
