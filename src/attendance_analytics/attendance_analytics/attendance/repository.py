from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, DepartmentPresence


class AttendanceRepository(Protocol):
    def get_records_for_date(
        self,
        work_date: date,
        *,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records of one day joined with the employee directory, ordered by employee code."""

        raise NotImplementedError

    def count_unique_check_ins_by_date(self, *, start_date: date, end_date: date) -> dict[date, int]:
        """Distinct employees with a check-in, per calendar date in [start_date, end_date]."""

        raise NotImplementedError

    def get_department_presence(self, work_date: date) -> Sequence[DepartmentPresence]:
        raise NotImplementedError
