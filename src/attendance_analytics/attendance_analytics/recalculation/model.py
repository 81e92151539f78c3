from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import clamp_month, month_bounds, month_keys, parse_iso_date, previous_month_range
from ..common.validators import normalize_filter, require_date_range
from ..core.constants import SUMMARY_ERROR_SAMPLES
from ..core.enums import ProcessStatus


@dataclass(frozen=True)
class RecalculationOptions:
    start_date: date
    end_date: date
    process_id: Optional[str] = None
    employee_filter: Optional[tuple[str, ...]] = None
    department_filter: Optional[tuple[str, ...]] = None
    force_recalculation: bool = True

    @classmethod
    def build(
        cls,
        *,
        today: date,
        max_range_days: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        process_id: Optional[str] = None,
        employee_filter: Optional[Sequence[str] | str] = None,
        department_filter: Optional[Sequence[str] | str] = None,
        force_recalculation: bool = True,
    ) -> "RecalculationOptions":
        """Fill defaults and validate.

        With no dates the previous calendar month is recalculated; a single
        bound is completed to the end/start of its own month.
        """
        if start_date is None and end_date is None:
            start_date, end_date = previous_month_range(today)
        elif end_date is None:
            end_date = month_bounds(start_date.strftime("%Y-%m"))[1]
        elif start_date is None:
            start_date = month_bounds(end_date.strftime("%Y-%m"))[0]

        require_date_range(start_date, end_date, max_days=max_range_days)

        employees = normalize_filter(employee_filter)
        departments = normalize_filter(department_filter)
        return cls(
            start_date=start_date,
            end_date=end_date,
            process_id=(process_id or "").strip() or None,
            employee_filter=tuple(employees) if employees else None,
            department_filter=tuple(departments) if departments else None,
            force_recalculation=bool(force_recalculation),
        )

    @classmethod
    def from_payload(cls, payload: dict, *, today: date, max_range_days: int) -> "RecalculationOptions":
        start = payload.get("start_date")
        end = payload.get("end_date")
        force = payload.get("force_recalculation", True)
        if isinstance(force, str):
            force = force.strip().lower() not in {"0", "false", "no"}
        return cls.build(
            today=today,
            max_range_days=max_range_days,
            start_date=parse_iso_date(start) if start else None,
            end_date=parse_iso_date(end) if end else None,
            process_id=payload.get("process_id"),
            employee_filter=payload.get("employee_filter"),
            department_filter=payload.get("department_filter"),
            force_recalculation=force,
        )

    @property
    def months(self) -> list[str]:
        return month_keys(self.start_date, self.end_date)

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def clamp(self, month: str) -> tuple[date, date]:
        return clamp_month(month, self.start_date, self.end_date)


@dataclass
class RecalculationStats:
    attendance_records_processed: int = 0
    metrics_recalculated: int = 0
    employees_processed: int = 0
    days_processed: int = 0

    def to_dict(self) -> dict:
        return {
            "attendance_records_processed": self.attendance_records_processed,
            "metrics_recalculated": self.metrics_recalculated,
            "employees_processed": self.employees_processed,
            "days_processed": self.days_processed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecalculationStats":
        return cls(**{k: int(data.get(k, 0)) for k in cls().to_dict()})


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class RecalculationProgress:
    """Checkpoint of one run; persisted so a later process can resume it."""

    process_id: str
    start_time: datetime
    start_date: date
    end_date: date
    months: list[str]
    status: ProcessStatus = ProcessStatus.INITIALIZING
    employee_filter: Optional[list[str]] = None
    department_filter: Optional[list[str]] = None
    force_recalculation: bool = True
    completed_month_keys: list[str] = field(default_factory=list)
    current_month: Optional[str] = None
    total_days: int = 0
    completed_days: int = 0
    stats: RecalculationStats = field(default_factory=RecalculationStats)
    employee_codes_seen: set[str] = field(default_factory=set)
    # Totals as of the last completed month; a resume restarts from these.
    completed_stats: RecalculationStats = field(default_factory=RecalculationStats)
    completed_employee_codes: set[str] = field(default_factory=set)
    errors: list[dict] = field(default_factory=list)
    month_summaries: dict[str, dict] = field(default_factory=dict)
    end_time: Optional[datetime] = None
    duration_ms: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def start(cls, options: RecalculationOptions, *, process_id: str, now: datetime) -> "RecalculationProgress":
        return cls(
            process_id=process_id,
            start_time=now,
            start_date=options.start_date,
            end_date=options.end_date,
            months=options.months,
            employee_filter=list(options.employee_filter) if options.employee_filter else None,
            department_filter=list(options.department_filter) if options.department_filter else None,
            force_recalculation=options.force_recalculation,
            total_days=options.total_days,
        )

    @property
    def total_months(self) -> int:
        return len(self.months)

    @property
    def completed_months(self) -> int:
        return len(self.completed_month_keys)

    def covers(self, options: RecalculationOptions) -> bool:
        """Same range and filters, so its completed months are valid for ``options``."""
        return (
            self.start_date == options.start_date
            and self.end_date == options.end_date
            and sorted(self.employee_filter or []) == sorted(options.employee_filter or [])
            and sorted(self.department_filter or []) == sorted(options.department_filter or [])
        )

    def mark_month_completed(self, month: str) -> None:
        if month not in self.completed_month_keys:
            self.completed_month_keys.append(month)
        self.completed_stats = RecalculationStats.from_dict(self.stats.to_dict())
        self.completed_employee_codes = set(self.employee_codes_seen)

    def rollback_partial_month(self) -> None:
        """Drop counts of a month that was interrupted before completing."""
        self.stats = RecalculationStats.from_dict(self.completed_stats.to_dict())
        self.employee_codes_seen = set(self.completed_employee_codes)

    def record_employee(self, employee_code: str) -> None:
        self.employee_codes_seen.add(employee_code)
        self.stats.employees_processed = len(self.employee_codes_seen)

    def record_error(self, message: str, *, at: datetime, **scope: Any) -> None:
        entry = {k: v for k, v in scope.items() if v is not None}
        entry["error"] = message
        entry["timestamp"] = at.isoformat()
        self.errors.append(entry)

    def to_dict(self) -> dict:
        return {
            "process_id": self.process_id,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "duration_ms": self.duration_ms,
            "status": self.status.value,
            "date_range": {"start": self.start_date.isoformat(), "end": self.end_date.isoformat()},
            "filters": {"employees": self.employee_filter, "departments": self.department_filter},
            "force_recalculation": self.force_recalculation,
            "months": list(self.months),
            "total_months": self.total_months,
            "completed_months": self.completed_months,
            "completed_month_keys": list(self.completed_month_keys),
            "current_month": self.current_month,
            "total_days": self.total_days,
            "completed_days": self.completed_days,
            "stats": self.stats.to_dict(),
            "employee_codes_seen": sorted(self.employee_codes_seen),
            "completed_stats": self.completed_stats.to_dict(),
            "completed_employee_codes": sorted(self.completed_employee_codes),
            "errors": list(self.errors),
            "month_summaries": dict(self.month_summaries),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecalculationProgress":
        date_range = data["date_range"]
        filters = data.get("filters") or {}
        end_time = data.get("end_time")
        return cls(
            process_id=str(data["process_id"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            start_date=parse_iso_date(date_range["start"]),
            end_date=parse_iso_date(date_range["end"]),
            months=list(data["months"]),
            status=ProcessStatus(data["status"]),
            employee_filter=filters.get("employees"),
            department_filter=filters.get("departments"),
            force_recalculation=bool(data.get("force_recalculation", True)),
            completed_month_keys=list(data.get("completed_month_keys") or []),
            current_month=data.get("current_month"),
            total_days=int(data.get("total_days", 0)),
            completed_days=int(data.get("completed_days", 0)),
            stats=RecalculationStats.from_dict(data.get("stats") or {}),
            employee_codes_seen=set(data.get("employee_codes_seen") or []),
            completed_stats=RecalculationStats.from_dict(data.get("completed_stats") or {}),
            completed_employee_codes=set(data.get("completed_employee_codes") or []),
            errors=list(data.get("errors") or []),
            month_summaries=dict(data.get("month_summaries") or {}),
            end_time=datetime.fromisoformat(end_time) if end_time else None,
            duration_ms=data.get("duration_ms"),
            error=data.get("error"),
        )


@dataclass(frozen=True)
class RecalculationSummary:
    process_id: str
    success: bool
    status: ProcessStatus
    stats: RecalculationStats
    errors: int
    error_samples: list[dict]
    months_completed: int
    total_months: int
    days_completed: int
    total_days: int
    duration_ms: Optional[int]
    error: Optional[str] = None

    @classmethod
    def from_progress(cls, progress: RecalculationProgress) -> "RecalculationSummary":
        return cls(
            process_id=progress.process_id,
            success=progress.status == ProcessStatus.COMPLETED and not progress.errors,
            status=progress.status,
            stats=RecalculationStats.from_dict(progress.stats.to_dict()),
            errors=len(progress.errors),
            error_samples=[dict(e) for e in progress.errors[:SUMMARY_ERROR_SAMPLES]],
            months_completed=progress.completed_months,
            total_months=progress.total_months,
            days_completed=progress.completed_days,
            total_days=progress.total_days,
            duration_ms=progress.duration_ms,
            error=progress.error,
        )

    def to_dict(self) -> dict:
        return {
            "process_id": self.process_id,
            "success": self.success,
            "status": self.status.value,
            "stats": self.stats.to_dict(),
            "errors": self.errors,
            "error_samples": self.error_samples,
            "months_completed": self.months_completed,
            "total_months": self.total_months,
            "days_completed": self.days_completed,
            "total_days": self.total_days,
            "duration": self.duration_ms,
            "error": self.error,
        }
