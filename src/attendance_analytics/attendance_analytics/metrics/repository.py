from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import MonthSummary, UnifiedAttendanceMetric


class UnifiedMetricsRepository(Protocol):
    def ensure_schema(self) -> None:
        """Create unified_attendance_metrics when missing (first-run bootstrap)."""

        raise NotImplementedError

    def delete_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> int:
        raise NotImplementedError

    def upsert(self, metric: UnifiedAttendanceMetric) -> None:
        """Insert, or overwrite every field and bump updated_at on (date, employee_code) conflict."""

        raise NotImplementedError

    def existing_keys(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> set[tuple[date, str]]:
        raise NotImplementedError

    def summarize(self, *, start_date: date, end_date: date) -> MonthSummary:
        raise NotImplementedError
