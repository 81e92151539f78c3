from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_date, to_float
from .model import MonthSummary, UnifiedAttendanceMetric
from .repository import UnifiedMetricsRepository

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS unified_attendance_metrics (
    id BIGINT AUTO_INCREMENT PRIMARY KEY,
    date DATE NOT NULL,
    employee_code VARCHAR(50) NOT NULL,
    department VARCHAR(100),
    check_in DATETIME NULL,
    check_out DATETIME NULL,
    total_hours DECIMAL(5,2),
    regular_hours DECIMAL(5,2),
    overtime_hours DECIMAL(5,2),
    status VARCHAR(20),
    is_late TINYINT(1) NOT NULL DEFAULT 0,
    is_early_departure TINYINT(1) NOT NULL DEFAULT 0,
    break_duration DECIMAL(5,2) NOT NULL DEFAULT 0,
    productivity_score DECIMAL(3,2),
    created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE KEY uq_unified_date_employee (date, employee_code)
)
"""


class MySQLUnifiedMetricsRepository(UnifiedMetricsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ensure_schema(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(CREATE_TABLE_SQL)

    @staticmethod
    def _range_where(
        start_date: date,
        end_date: date,
        employee_codes: Optional[Sequence[str]],
        departments: Optional[Sequence[str]],
    ) -> tuple[str, list]:
        clauses = ["date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_codes:
            clause, values = in_clause("employee_code", employee_codes)
            clauses.append(clause)
            params.extend(values)
        if departments:
            clause, values = in_clause("department", departments)
            clauses.append(clause)
            params.extend(values)
        return " AND ".join(clauses), params

    def delete_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> int:
        where, params = self._range_where(start_date, end_date, employee_codes, departments)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM unified_attendance_metrics WHERE {where}", tuple(params))
            return int(cur.rowcount)

    def upsert(self, metric: UnifiedAttendanceMetric) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO unified_attendance_metrics (
                    date, employee_code, department, check_in, check_out,
                    total_hours, regular_hours, overtime_hours, status,
                    is_late, is_early_departure, break_duration, productivity_score
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    department = VALUES(department),
                    check_in = VALUES(check_in),
                    check_out = VALUES(check_out),
                    total_hours = VALUES(total_hours),
                    regular_hours = VALUES(regular_hours),
                    overtime_hours = VALUES(overtime_hours),
                    status = VALUES(status),
                    is_late = VALUES(is_late),
                    is_early_departure = VALUES(is_early_departure),
                    break_duration = VALUES(break_duration),
                    productivity_score = VALUES(productivity_score),
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    metric.work_date,
                    metric.employee_code,
                    metric.department,
                    metric.check_in,
                    metric.check_out,
                    metric.total_hours,
                    metric.regular_hours,
                    metric.overtime_hours,
                    metric.status.value,
                    int(metric.is_late),
                    int(metric.is_early_departure),
                    metric.break_duration,
                    metric.productivity_score,
                ),
            )

    def existing_keys(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> set[tuple[date, str]]:
        where, params = self._range_where(start_date, end_date, employee_codes, departments)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT date, employee_code FROM unified_attendance_metrics WHERE {where}", tuple(params))
            return {(to_date(r["date"]), str(r["employee_code"])) for r in fetchall(cur)}

    def summarize(self, *, start_date: date, end_date: date) -> MonthSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS total_records,
                    COUNT(DISTINCT employee_code) AS unique_employees,
                    COUNT(CASE WHEN status = 'present' THEN 1 END) AS present_count,
                    COUNT(CASE WHEN status = 'absent' THEN 1 END) AS absent_count,
                    COUNT(CASE WHEN status = 'incomplete' THEN 1 END) AS incomplete_count,
                    COUNT(CASE WHEN is_late = 1 THEN 1 END) AS late_arrivals,
                    ROUND(AVG(total_hours), 2) AS avg_hours,
                    COALESCE(SUM(overtime_hours), 0) AS total_overtime,
                    ROUND(AVG(productivity_score), 3) AS avg_productivity
                FROM unified_attendance_metrics
                WHERE date BETWEEN %s AND %s
                """,
                (start_date, end_date),
            )
            r = fetchone(cur)
            if not r:
                return MonthSummary()
            return MonthSummary(
                total_records=int(r["total_records"] or 0),
                unique_employees=int(r["unique_employees"] or 0),
                present_count=int(r["present_count"] or 0),
                absent_count=int(r["absent_count"] or 0),
                incomplete_count=int(r["incomplete_count"] or 0),
                late_arrivals=int(r["late_arrivals"] or 0),
                average_hours=to_float(r.get("avg_hours")),
                total_overtime=to_float(r.get("total_overtime")) or 0.0,
                average_productivity=to_float(r.get("avg_productivity")),
            )
