from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, to_date, to_float
from .model import AttendanceRecord, DepartmentPresence
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_records_for_date(
        self,
        work_date: date,
        *,
        employee_codes: Optional[Sequence[str]] = None,
        departments: Optional[Sequence[str]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["ar.date = %s"]
        params: list[object] = [work_date]

        if employee_codes:
            clause, values = in_clause("ar.employee_code", employee_codes)
            clauses.append(clause)
            params.extend(values)
        if departments:
            clause, values = in_clause("er.department", departments)
            clauses.append(clause)
            params.extend(values)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.employee_code, ar.date, ar.check_in, ar.check_out,
                    ar.total_hours, ar.regular_hours, ar.overtime_hours,
                    er.department, er.designation
                FROM attendance_records ar
                LEFT JOIN employee_records er ON er.employee_code = ar.employee_code
                WHERE {where}
                ORDER BY ar.employee_code
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceRecord(
                    employee_code=str(r["employee_code"]),
                    work_date=to_date(r["date"]),
                    check_in=r.get("check_in"),
                    check_out=r.get("check_out"),
                    department=r.get("department"),
                    designation=r.get("designation"),
                    total_hours=to_float(r.get("total_hours")),
                    regular_hours=to_float(r.get("regular_hours")),
                    overtime_hours=to_float(r.get("overtime_hours")),
                )
                for r in rows
            ]

    def count_unique_check_ins_by_date(self, *, start_date: date, end_date: date) -> dict[date, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.date AS work_date, COUNT(DISTINCT ar.employee_code) AS unique_check_ins
                FROM attendance_records ar
                WHERE ar.date BETWEEN %s AND %s AND ar.check_in IS NOT NULL
                GROUP BY ar.date
                ORDER BY ar.date
                """,
                (start_date, end_date),
            )
            return {to_date(r["work_date"]): int(r["unique_check_ins"]) for r in fetchall(cur)}

    def get_department_presence(self, work_date: date) -> Sequence[DepartmentPresence]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    er.department,
                    COUNT(DISTINCT er.employee_code) AS total_employees,
                    COUNT(DISTINCT CASE WHEN ar.check_in IS NOT NULL THEN er.employee_code END) AS present_employees
                FROM employee_records er
                LEFT JOIN attendance_records ar
                    ON ar.employee_code = er.employee_code AND ar.date = %s
                WHERE er.is_active = 1
                GROUP BY er.department
                ORDER BY er.department
                """,
                (work_date,),
            )
            return [
                DepartmentPresence(
                    department=r.get("department"),
                    total_employees=int(r["total_employees"] or 0),
                    present_employees=int(r["present_employees"] or 0),
                )
                for r in fetchall(cur)
            ]
