from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from types import ModuleType
from zoneinfo import ZoneInfo

from ..common.datetime_utils import parse_hhmm
from . import constants


@dataclass(frozen=True)
class AnalyticsSettings:
    """Analytics knobs read from the active settings module."""

    timezone: str = constants.DEFAULT_TIMEZONE
    fallback_total_employees: int = constants.DEFAULT_FALLBACK_TOTAL_EMPLOYEES
    tee_lookback_days: int = constants.DEFAULT_TEE_LOOKBACK_DAYS
    standard_start_time: time = time(9, 0)
    grace_minutes: int = constants.DEFAULT_GRACE_MINUTES
    grace_violation_margin_minutes: int = constants.DEFAULT_GRACE_VIOLATION_MARGIN_MINUTES
    standard_end_time: time = time(18, 0)
    standard_work_hours: float = constants.DEFAULT_STANDARD_WORK_HOURS
    absent_productivity_score: float = constants.DEFAULT_ABSENT_PRODUCTIVITY_SCORE
    progress_file: str = constants.DEFAULT_PROGRESS_FILE
    checkpoint_every_days: int = constants.DEFAULT_CHECKPOINT_EVERY_DAYS
    max_range_days: int = constants.DEFAULT_MAX_RANGE_DAYS

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_module(cls, settings: ModuleType) -> "AnalyticsSettings":
        def get(name: str, default):
            return getattr(settings, name, default)

        return cls(
            timezone=str(get("TIMEZONE", constants.DEFAULT_TIMEZONE)),
            fallback_total_employees=int(get("FALLBACK_TOTAL_EMPLOYEES", constants.DEFAULT_FALLBACK_TOTAL_EMPLOYEES)),
            tee_lookback_days=int(get("TEE_LOOKBACK_DAYS", constants.DEFAULT_TEE_LOOKBACK_DAYS)),
            standard_start_time=parse_hhmm(str(get("STANDARD_START_TIME", constants.DEFAULT_STANDARD_START_TIME))),
            grace_minutes=int(get("GRACE_MINUTES", constants.DEFAULT_GRACE_MINUTES)),
            grace_violation_margin_minutes=int(
                get("GRACE_VIOLATION_MARGIN_MINUTES", constants.DEFAULT_GRACE_VIOLATION_MARGIN_MINUTES)
            ),
            standard_end_time=parse_hhmm(str(get("STANDARD_END_TIME", constants.DEFAULT_STANDARD_END_TIME))),
            standard_work_hours=float(get("STANDARD_WORK_HOURS", constants.DEFAULT_STANDARD_WORK_HOURS)),
            absent_productivity_score=float(
                get("ABSENT_PRODUCTIVITY_SCORE", constants.DEFAULT_ABSENT_PRODUCTIVITY_SCORE)
            ),
            progress_file=str(get("PROGRESS_FILE", constants.DEFAULT_PROGRESS_FILE)),
            checkpoint_every_days=int(get("CHECKPOINT_EVERY_DAYS", constants.DEFAULT_CHECKPOINT_EVERY_DAYS)),
            max_range_days=int(get("MAX_RANGE_DAYS", constants.DEFAULT_MAX_RANGE_DAYS)),
        )
