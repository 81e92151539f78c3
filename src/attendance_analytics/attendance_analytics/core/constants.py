"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Karachi"
DEFAULT_FALLBACK_TOTAL_EMPLOYEES = 293
DEFAULT_TEE_LOOKBACK_DAYS = 30

DEFAULT_STANDARD_START_TIME = "09:00"
DEFAULT_GRACE_MINUTES = 30
DEFAULT_GRACE_VIOLATION_MARGIN_MINUTES = 0
DEFAULT_STANDARD_END_TIME = "18:00"
DEFAULT_STANDARD_WORK_HOURS = 8.0

DEFAULT_ABSENT_PRODUCTIVITY_SCORE = 1.0
MIN_PRODUCTIVITY_SCORE = 0.1
MAX_PRODUCTIVITY_SCORE = 1.0

DEFAULT_PROGRESS_FILE = "logs/recalculation-progress.json"
DEFAULT_CHECKPOINT_EVERY_DAYS = 5
DEFAULT_MAX_RANGE_DAYS = 366
SUMMARY_ERROR_SAMPLES = 5
