from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days, now_in
from ..core.constants import DEFAULT_CHECKPOINT_EVERY_DAYS
from ..core.enums import ProcessStatus
from ..metrics.calculator.base import MetricsCalculator
from ..metrics.model import UnifiedAttendanceMetric
from ..metrics.repository import UnifiedMetricsRepository
from .model import RecalculationOptions, RecalculationProgress, RecalculationSummary
from .progress_store import ProgressStore

logger = logging.getLogger(__name__)


class UnifiedMetricsRecalculator:
    """Rebuild unified attendance metrics over a date range.

    Months run in order, days in order. Each month is cleared before it is
    rebuilt, so rerunning a range converges to the same rows. The checkpoint
    lets a new process skip months an interrupted run already finished.
    ``run`` never raises: the returned summary carries the outcome.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        metrics: UnifiedMetricsRepository,
        progress_store: ProgressStore,
        calculator: MetricsCalculator,
        *,
        tz: tzinfo,
        checkpoint_every_days: int = DEFAULT_CHECKPOINT_EVERY_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._attendance = attendance
        self._metrics = metrics
        self._progress_store = progress_store
        self._calculator = calculator
        self._tz = tz
        self._checkpoint_every_days = max(1, int(checkpoint_every_days))
        self._clock = clock or (lambda: now_in(tz))

    def load_progress(self) -> Optional[RecalculationProgress]:
        return self._progress_store.load()

    def run(self, options: RecalculationOptions) -> RecalculationSummary:
        now = self._clock()
        process_id = options.process_id or f"recalc_{int(now.timestamp() * 1000)}"
        progress = RecalculationProgress.start(options, process_id=process_id, now=now)

        logger.info(
            "Recalculation %s: %s..%s months=%s employees=%s departments=%s force=%s",
            process_id,
            options.start_date,
            options.end_date,
            ",".join(progress.months),
            len(options.employee_filter) if options.employee_filter else "all",
            ",".join(options.department_filter) if options.department_filter else "all",
            options.force_recalculation,
        )

        try:
            progress, remaining = self._check_for_existing_process(options, progress)
            self._process_months(progress, options, remaining)
            self._finish(progress, ProcessStatus.COMPLETED)
        except Exception as exc:
            logger.exception("Recalculation %s failed", progress.process_id)
            progress.error = str(exc)
            self._finish(progress, ProcessStatus.FAILED)

        summary = RecalculationSummary.from_progress(progress)
        self._log_summary(summary)
        return summary

    def _check_for_existing_process(
        self, options: RecalculationOptions, progress: RecalculationProgress
    ) -> tuple[RecalculationProgress, list[str]]:
        existing = self._progress_store.load()
        if (
            existing is not None
            and existing.status.is_resumable
            and existing.covers(options)
            and (options.process_id is None or options.process_id == existing.process_id)
        ):
            existing.status = ProcessStatus.RESUMING
            existing.error = None
            # The unfinished month restarts from day 1, so its counts are dropped.
            existing.rollback_partial_month()
            existing.completed_days = sum(
                self._day_count(*options.clamp(m)) for m in existing.completed_month_keys
            )
            remaining = [m for m in existing.months if m not in existing.completed_month_keys]
            logger.info(
                "Resuming %s: %d/%d months done, remaining=%s",
                existing.process_id,
                existing.completed_months,
                existing.total_months,
                ",".join(remaining) or "-",
            )
            progress = existing
        else:
            if existing is not None and existing.status.is_resumable:
                logger.info("Checkpoint %s does not match this run; starting fresh", existing.process_id)
            remaining = list(progress.months)

        self._save(progress)
        return progress, remaining

    def _process_months(
        self, progress: RecalculationProgress, options: RecalculationOptions, months: list[str]
    ) -> None:
        progress.status = ProcessStatus.IN_PROGRESS
        for month in months:
            progress.current_month = month
            self._save(progress)
            try:
                self._process_month(progress, options, month)
                progress.mark_month_completed(month)
                logger.info("Month %s completed", month)
            except Exception as exc:
                logger.warning("Month %s skipped: %s", month, exc, exc_info=True)
                progress.record_error(str(exc), at=self._clock(), month=month)
            self._save(progress)

    def _process_month(self, progress: RecalculationProgress, options: RecalculationOptions, month: str) -> None:
        start, end = options.clamp(month)
        logger.info("Processing %s (%s..%s, %d days)", month, start, end, self._day_count(start, end))

        self._metrics.ensure_schema()

        existing: set[tuple[date, str]] = set()
        if options.force_recalculation:
            cleared = self._metrics.delete_range(
                start_date=start,
                end_date=end,
                employee_codes=options.employee_filter,
                departments=options.department_filter,
            )
            logger.info("Cleared %d existing metric rows for %s", cleared, month)
        else:
            existing = self._metrics.existing_keys(
                start_date=start,
                end_date=end,
                employee_codes=options.employee_filter,
                departments=options.department_filter,
            )

        for walked, day in enumerate(iter_days(start, end), start=1):
            try:
                self._process_day(progress, options, day, existing)
                progress.completed_days += 1
            except Exception as exc:
                logger.warning("Day %s failed: %s", day, exc, exc_info=True)
                progress.record_error(str(exc), at=self._clock(), day=day.isoformat())
            if walked % self._checkpoint_every_days == 0:
                self._save(progress)

        self._summarize_month(progress, month, start, end)

    def _process_day(
        self,
        progress: RecalculationProgress,
        options: RecalculationOptions,
        day: date,
        existing: set[tuple[date, str]],
    ) -> None:
        records = self._attendance.get_records_for_date(
            day,
            employee_codes=options.employee_filter,
            departments=options.department_filter,
        )
        if not records:
            logger.debug("No attendance data for %s", day)
            return

        written = 0
        for record in records:
            progress.stats.attendance_records_processed += 1
            if (record.work_date, record.employee_code) in existing:
                continue
            try:
                metric = UnifiedAttendanceMetric.from_record(record, self._calculator.calculate(record))
                self._metrics.upsert(metric)
            except Exception as exc:
                logger.warning("Record %s on %s failed: %s", record.employee_code, day, exc)
                progress.record_error(
                    str(exc), at=self._clock(), day=day.isoformat(), employee_code=record.employee_code
                )
                continue
            written += 1
            progress.stats.metrics_recalculated += 1
            progress.record_employee(record.employee_code)

        progress.stats.days_processed += 1
        logger.info("Processed %d/%d records for %s", written, len(records), day)

    def _summarize_month(self, progress: RecalculationProgress, month: str, start: date, end: date) -> None:
        try:
            summary = self._metrics.summarize(start_date=start, end_date=end)
        except Exception as exc:
            logger.warning("Could not summarize %s: %s", month, exc)
            return
        progress.month_summaries[month] = summary.to_dict()
        logger.info(
            "Month %s: records=%d employees=%d present=%d absent=%d incomplete=%d late=%d "
            "avg_hours=%s overtime=%s avg_productivity=%s",
            month,
            summary.total_records,
            summary.unique_employees,
            summary.present_count,
            summary.absent_count,
            summary.incomplete_count,
            summary.late_arrivals,
            summary.average_hours,
            summary.total_overtime,
            summary.average_productivity,
        )

    def _finish(self, progress: RecalculationProgress, status: ProcessStatus) -> None:
        progress.status = status
        progress.current_month = None
        progress.end_time = self._clock()
        progress.duration_ms = int((progress.end_time - progress.start_time).total_seconds() * 1000)
        self._save(progress)

    def _save(self, progress: RecalculationProgress) -> None:
        try:
            self._progress_store.save(progress)
        except Exception as exc:
            # A lost checkpoint only costs rework on resume.
            logger.warning("Could not save progress for %s: %s", progress.process_id, exc, exc_info=True)

    @staticmethod
    def _day_count(start: date, end: date) -> int:
        return (end - start).days + 1

    def _log_summary(self, summary: RecalculationSummary) -> None:
        logger.info(
            "Recalculation %s %s in %sms: months %d/%d, days %d/%d, records=%d, metrics=%d, employees=%d, errors=%d",
            summary.process_id,
            summary.status.value,
            summary.duration_ms,
            summary.months_completed,
            summary.total_months,
            summary.days_completed,
            summary.total_days,
            summary.stats.attendance_records_processed,
            summary.stats.metrics_recalculated,
            summary.stats.employees_processed,
            summary.errors,
        )
        for sample in summary.error_samples:
            logger.warning("  %s: %s", sample.get("month") or sample.get("day"), sample.get("error"))
        if summary.errors > len(summary.error_samples):
            logger.warning("  ... and %d more errors", summary.errors - len(summary.error_samples))
