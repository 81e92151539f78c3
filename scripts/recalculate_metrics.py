"""Recalculate unified attendance metrics for a date range.

Examples:
  python scripts/recalculate_metrics.py
  python scripts/recalculate_metrics.py --start-date 2025-05-01 --end-date 2025-05-31
  python scripts/recalculate_metrics.py --employees 10090001,10090002
  python scripts/recalculate_metrics.py --departments IT,HR,Finance
  python scripts/recalculate_metrics.py --process-id recalc_1234567890   # resume
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_analytics.attendance_analytics.common.datetime_utils import parse_iso_date, today_in
from src.attendance_analytics.attendance_analytics.common.logging_config import setup_logging
from src.attendance_analytics.attendance_analytics.container import build_container
from src.attendance_analytics.attendance_analytics.core.exceptions import ValidationError
from src.attendance_analytics.attendance_analytics.core.settings import AnalyticsSettings
from src.attendance_analytics.attendance_analytics.recalculation.model import RecalculationOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=__doc__.splitlines()[0],
        epilog="\n".join(__doc__.splitlines()[2:]),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--start-date", help="YYYY-MM-DD (default: first day of last month)")
    parser.add_argument("--end-date", help="YYYY-MM-DD (default: last day of last month)")
    parser.add_argument("--employees", help="comma-separated employee codes")
    parser.add_argument("--departments", help="comma-separated department names")
    parser.add_argument("--process-id", help="custom process id; reuse one to resume it")
    parser.add_argument(
        "--no-force",
        dest="force",
        action="store_false",
        help="keep existing metric rows and only fill missing ones",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), bool(getattr(settings, "LOG_JSON", False)))
    analytics = AnalyticsSettings.from_module(settings)

    try:
        options = RecalculationOptions.build(
            today=today_in(analytics.tzinfo),
            max_range_days=analytics.max_range_days,
            start_date=parse_iso_date(args.start_date) if args.start_date else None,
            end_date=parse_iso_date(args.end_date) if args.end_date else None,
            process_id=args.process_id,
            employee_filter=args.employees,
            department_filter=args.departments,
            force_recalculation=args.force,
        )
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=analytics)
    summary = container.recalculator.run(options)
    print(json.dumps(summary.to_dict(), indent=2))
    return 0 if summary.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
