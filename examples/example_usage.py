"""Example: call the formula library through the service layer (no Flask)."""

import importlib
import json

from config import get_settings_module

from src.attendance_analytics.attendance_analytics.container import build_container
from src.attendance_analytics.attendance_analytics.core.settings import AnalyticsSettings


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=AnalyticsSettings.from_module(settings))
    print(json.dumps(container.formula_service.get_comprehensive_analytics(), indent=2))


if __name__ == "__main__":
    main()
