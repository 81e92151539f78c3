from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import setup_logging
from .container import build_container
from .core.settings import AnalyticsSettings
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .formulas.controller import register as register_formulas
from .recalculation.controller import register as register_recalculation

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), bool(getattr(settings, "LOG_JSON", False)))

    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    analytics = AnalyticsSettings.from_module(settings)
    logger.info(
        "settings=%s db=%s timezone=%s", settings_module, DBConfig.from_dict(db_config).describe(), analytics.timezone
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(db_config=db_config, settings=analytics)
    app.extensions["attendance_analytics"] = container

    register_formulas(app, container)
    register_recalculation(app, container)

    return app
