from __future__ import annotations

from pathlib import Path

from src.attendance_analytics.attendance_analytics.database.bootstrap import (
    _strip_comments,
    _strip_create_db_and_use,
    iter_sql_statements,
)

SCHEMA = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def test_split_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT \"x;\"; SELECT 1"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", 'SELECT "x;"', "SELECT 1"]


def test_schema_file_creates_the_three_tables():
    sql = _strip_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    assert not any(s.upper().startswith(("CREATE DATABASE", "USE ")) for s in statements)
    created = [s.split("(")[0].split()[-1] for s in statements if s.upper().startswith("CREATE TABLE")]
    assert created == ["employee_records", "attendance_records", "unified_attendance_metrics"]
