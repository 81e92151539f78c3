from __future__ import annotations

from enum import Enum


class MetricStatus(str, Enum):
    """Day status stored in unified_attendance_metrics."""

    PRESENT = "present"
    ABSENT = "absent"
    INCOMPLETE = "incomplete"


class ProcessStatus(str, Enum):
    """Lifecycle of a recalculation run."""

    INITIALIZING = "initializing"
    IN_PROGRESS = "in_progress"
    RESUMING = "resuming"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"

    @property
    def is_resumable(self) -> bool:
        return self in (ProcessStatus.IN_PROGRESS, ProcessStatus.PAUSED)
