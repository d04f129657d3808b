from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from src.timeclock.timeclock.common.datetime_utils import elapsed_seconds, format_hhmm, from_naive_utc, to_naive_utc
from src.timeclock.timeclock.core.logging_config import LOGGER_NAME, configure_logging
from src.timeclock.timeclock.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_split_ignores_semicolons_in_strings():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;\" ;\n\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'SELECT "x;"',
        "SELECT 1",
    ]


def test_strip_create_database_and_use():
    sql = "CREATE DATABASE foo;\nUSE foo;\nCREATE TABLE t (id INT);\n"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]


def test_schema_defines_time_entries_table():
    statements = list(iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))

    assert any("CREATE TABLE" in s and "time_entries" in s for s in statements)


def test_elapsed_seconds_floors_and_clamps():
    start = datetime(2026, 1, 3, 8, 0, tzinfo=timezone.utc)

    assert elapsed_seconds(start, start + timedelta(seconds=90, microseconds=999999)) == 90
    assert elapsed_seconds(start, start - timedelta(hours=1)) == 0


def test_naive_utc_conversion_keeps_instant():
    plus_two = timezone(timedelta(hours=2))
    value = datetime(2026, 1, 3, 10, 0, tzinfo=plus_two)

    naive = to_naive_utc(value)

    assert naive == datetime(2026, 1, 3, 8, 0)
    assert from_naive_utc(naive) == value
    assert to_naive_utc(None) is None


def test_format_hhmm():
    assert format_hhmm(16 * 3600) == "16:00"
    assert format_hhmm(8 * 3600 + 59 * 60 + 59) == "08:59"
    assert format_hhmm(-5) == "00:00"


def test_configure_logging_is_idempotent():
    logger = configure_logging("debug")
    configure_logging("warning")

    marked = [h for h in logger.handlers if getattr(h, "_timeclock_handler", False)]
    assert logger.name == LOGGER_NAME
    assert len(marked) == 1
    assert logger.level == logging.WARNING


def test_settings_module_follows_app_env(monkeypatch):
    from config import get_settings_module

    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings_module() == "config.production"
    monkeypatch.setenv("APP_ENV", "test")
    assert get_settings_module() == "config.testing"
    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"


def test_schema_allows_one_open_entry_per_user():
    table = next(
        s
        for s in iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
        if "CREATE TABLE" in s
    )

    assert "open_user_id INT AS (IF(state = 'CLOCKED_OUT', NULL, user_id)) STORED" in table
    assert "UNIQUE KEY uq_time_entries_open_user (open_user_id)" in table
