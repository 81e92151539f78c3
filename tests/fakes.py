from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from src.attendance_analytics.attendance_analytics.attendance.model import AttendanceRecord, DepartmentPresence
from src.attendance_analytics.attendance_analytics.core.enums import MetricStatus
from src.attendance_analytics.attendance_analytics.metrics.model import MonthSummary, UnifiedAttendanceMetric
from src.attendance_analytics.attendance_analytics.recalculation.model import RecalculationProgress


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        self._now += self._step
        return self._now


class InMemoryAttendance:
    def __init__(
        self,
        records: Sequence[AttendanceRecord] = (),
        *,
        unique_counts: Optional[dict[date, int]] = None,
        presence: Optional[dict[date, list[DepartmentPresence]]] = None,
        failing_days: Sequence[date] = (),
    ):
        self.records = list(records)
        self._unique_counts = unique_counts
        self._presence = presence or {}
        self._failing_days = set(failing_days)
        self.queried_days: list[date] = []

    def get_records_for_date(self, work_date: date, *, employee_codes=None, departments=None):
        self.queried_days.append(work_date)
        if work_date in self._failing_days:
            raise RuntimeError(f"attendance store unavailable for {work_date}")
        out = [r for r in self.records if r.work_date == work_date]
        if employee_codes:
            out = [r for r in out if r.employee_code in employee_codes]
        if departments:
            out = [r for r in out if r.department in departments]
        return sorted(out, key=lambda r: r.employee_code)

    def count_unique_check_ins_by_date(self, *, start_date: date, end_date: date) -> dict[date, int]:
        if self._unique_counts is not None:
            return {d: c for d, c in self._unique_counts.items() if start_date <= d <= end_date}
        seen: dict[date, set[str]] = defaultdict(set)
        for r in self.records:
            if r.has_check_in and start_date <= r.work_date <= end_date:
                seen[r.work_date].add(r.employee_code)
        return {d: len(codes) for d, codes in seen.items()}

    def get_department_presence(self, work_date: date):
        return list(self._presence.get(work_date, []))


class InMemoryUnifiedMetrics:
    def __init__(
        self,
        clock,
        *,
        failing_employees: Sequence[str] = (),
        fail_schema: bool = False,
        failing_delete_months: Sequence[str] = (),
    ):
        self.rows: dict[tuple[date, str], UnifiedAttendanceMetric] = {}
        self._clock = clock
        self._failing_employees = set(failing_employees)
        self._fail_schema = fail_schema
        self._failing_delete_months = set(failing_delete_months)
        self.upserts = 0
        self.deleted_ranges: list[tuple[date, date]] = []

    def ensure_schema(self) -> None:
        if self._fail_schema:
            raise RuntimeError("cannot create unified_attendance_metrics")

    def _matches(self, m: UnifiedAttendanceMetric, start_date, end_date, employee_codes, departments) -> bool:
        if not start_date <= m.work_date <= end_date:
            return False
        if employee_codes and m.employee_code not in employee_codes:
            return False
        if departments and m.department not in departments:
            return False
        return True

    def delete_range(self, *, start_date, end_date, employee_codes=None, departments=None) -> int:
        if start_date.strftime("%Y-%m") in self._failing_delete_months:
            raise RuntimeError(f"lock wait timeout clearing {start_date:%Y-%m}")
        self.deleted_ranges.append((start_date, end_date))
        doomed = [k for k, m in self.rows.items() if self._matches(m, start_date, end_date, employee_codes, departments)]
        for k in doomed:
            del self.rows[k]
        return len(doomed)

    def upsert(self, metric: UnifiedAttendanceMetric) -> None:
        if metric.employee_code in self._failing_employees:
            raise RuntimeError(f"write rejected for {metric.employee_code}")
        self.upserts += 1
        self.rows[metric.key] = replace(metric, updated_at=self._clock())

    def existing_keys(self, *, start_date, end_date, employee_codes=None, departments=None):
        return {k for k, m in self.rows.items() if self._matches(m, start_date, end_date, employee_codes, departments)}

    def summarize(self, *, start_date, end_date) -> MonthSummary:
        rows = [m for m in self.rows.values() if start_date <= m.work_date <= end_date]
        return MonthSummary(
            total_records=len(rows),
            unique_employees=len({m.employee_code for m in rows}),
            present_count=sum(1 for m in rows if m.status == MetricStatus.PRESENT),
            absent_count=sum(1 for m in rows if m.status == MetricStatus.ABSENT),
            incomplete_count=sum(1 for m in rows if m.status == MetricStatus.INCOMPLETE),
            late_arrivals=sum(1 for m in rows if m.is_late),
        )


class InMemoryProgressStore:
    """Keeps every saved checkpoint as its serialized form."""

    def __init__(self, initial: Optional[RecalculationProgress] = None):
        self.saved: list[dict] = [initial.to_dict()] if initial else []

    def load(self) -> Optional[RecalculationProgress]:
        return RecalculationProgress.from_dict(self.saved[-1]) if self.saved else None

    def save(self, progress: RecalculationProgress) -> None:
        self.saved.append(progress.to_dict())


class FailingProgressStore(InMemoryProgressStore):
    def save(self, progress: RecalculationProgress) -> None:
        raise OSError("disk full")
