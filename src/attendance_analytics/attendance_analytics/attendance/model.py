from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's punch record for one work day (read-only input)."""

    employee_code: str
    work_date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    department: Optional[str] = None
    designation: Optional[str] = None
    # Precomputed upstream; None when the ingesting side did not fill them.
    total_hours: Optional[float] = None
    regular_hours: Optional[float] = None
    overtime_hours: Optional[float] = None

    @property
    def has_check_in(self) -> bool:
        return self.check_in is not None

    @property
    def is_complete(self) -> bool:
        return self.check_in is not None and self.check_out is not None


@dataclass(frozen=True)
class DepartmentPresence:
    """Read-model: active headcount vs. checked-in headcount for one department."""

    department: Optional[str]
    total_employees: int
    present_employees: int
