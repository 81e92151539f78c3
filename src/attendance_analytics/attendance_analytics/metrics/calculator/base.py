from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord
from ..model import DayMetrics


class MetricsCalculator(ABC):
    """Calculator interface (Strategy Pattern for day metrics)."""

    @abstractmethod
    def calculate(self, record: AttendanceRecord) -> DayMetrics:
        raise NotImplementedError
