from __future__ import annotations

from ...attendance.model import AttendanceRecord
from ...core.constants import (
    DEFAULT_ABSENT_PRODUCTIVITY_SCORE,
    MAX_PRODUCTIVITY_SCORE,
    MIN_PRODUCTIVITY_SCORE,
)
from ...core.enums import MetricStatus
from ...formulas.rules import ShiftRules
from ..model import DayMetrics
from .base import MetricsCalculator

LATE_PENALTY = 0.1
EARLY_DEPARTURE_PENALTY = 0.1
SHORT_DAY_PENALTY = 0.2
LONG_DAY_BONUS = 0.1


class StandardMetricsCalculator(MetricsCalculator):
    """Standard rule: status from punches, 1.0 score minus penalties, clamped to [0.1, 1.0]."""

    def __init__(self, rules: ShiftRules, *, absent_productivity_score: float = DEFAULT_ABSENT_PRODUCTIVITY_SCORE):
        self._rules = rules
        self._absent_score = float(absent_productivity_score)

    def calculate(self, record: AttendanceRecord) -> DayMetrics:
        if not record.has_check_in:
            return DayMetrics(status=MetricStatus.ABSENT, productivity_score=self._absent_score)

        status = MetricStatus.PRESENT if record.check_out is not None else MetricStatus.INCOMPLETE
        hours = self._rules.hours_for(record)
        is_late = self._rules.is_late(record.check_in)
        is_early = self._rules.is_early_departure(record.check_out)

        return DayMetrics(
            status=status,
            total_hours=hours.total,
            regular_hours=hours.regular,
            overtime_hours=hours.overtime,
            is_late=is_late,
            is_early_departure=is_early,
            productivity_score=self.productivity_score(
                total_hours=hours.total, is_late=is_late, is_early_departure=is_early
            ),
        )

    def productivity_score(self, *, total_hours: float, is_late: bool, is_early_departure: bool) -> float:
        score = 1.0
        if is_late:
            score -= LATE_PENALTY
        if is_early_departure:
            score -= EARLY_DEPARTURE_PENALTY
        if total_hours < self._rules.standard_hours:
            score -= SHORT_DAY_PENALTY
        if total_hours >= self._rules.standard_hours + 1:
            score += LONG_DAY_BONUS
        return round(max(MIN_PRODUCTIVITY_SCORE, min(MAX_PRODUCTIVITY_SCORE, score)), 2)
