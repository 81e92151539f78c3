"""Settings shared by every environment, overridable through environment variables."""
import os


def _env_bool(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _env_bool("LOG_JSON", "0")

# Every date boundary and time-of-day rule resolves in this zone (UTC+5).
TIMEZONE = os.getenv("TIMEZONE", "Asia/Karachi")

# Used only when a weekday has no TEE entry.
FALLBACK_TOTAL_EMPLOYEES = int(os.getenv("FALLBACK_TOTAL_EMPLOYEES", "293"))
TEE_LOOKBACK_DAYS = int(os.getenv("TEE_LOOKBACK_DAYS", "30"))

STANDARD_START_TIME = os.getenv("STANDARD_START_TIME", "09:00")
GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "30"))
GRACE_VIOLATION_MARGIN_MINUTES = int(os.getenv("GRACE_VIOLATION_MARGIN_MINUTES", "0"))
STANDARD_END_TIME = os.getenv("STANDARD_END_TIME", "18:00")
STANDARD_WORK_HOURS = float(os.getenv("STANDARD_WORK_HOURS", "8"))
ABSENT_PRODUCTIVITY_SCORE = float(os.getenv("ABSENT_PRODUCTIVITY_SCORE", "1.0"))

PROGRESS_FILE = os.getenv("PROGRESS_FILE", "logs/recalculation-progress.json")
CHECKPOINT_EVERY_DAYS = int(os.getenv("CHECKPOINT_EVERY_DAYS", "5"))
MAX_RANGE_DAYS = int(os.getenv("MAX_RANGE_DAYS", "366"))
