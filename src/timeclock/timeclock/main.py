from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import CAP_REMINDER_OFFSET_MINUTES, DEFAULT_CAP_MINUTES
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .time_entries.controller import register as register_time_entries

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", None)
    cap_minutes = int(getattr(settings, "SOFT_CAP_MINUTES", DEFAULT_CAP_MINUTES))
    reminder_minutes = int(getattr(settings, "CAP_REMINDER_OFFSET_MINUTES", CAP_REMINDER_OFFSET_MINUTES))

    logger.info(
        "settings=%s db=%s@%s:%s/%s cap=%smin reminder=%smin",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        cap_minutes,
        reminder_minutes,
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        cap_minutes=cap_minutes,
        reminder_minutes=reminder_minutes,
    )
    register_time_entries(app, container)

    return app
