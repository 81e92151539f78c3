from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_negative_int
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    formulas = container.formula_service

    def json_endpoint(explanation: str, failure: str):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    data = view(*args, **kwargs)
                except ValidationError as e:
                    return jsonify({"success": False, "error": str(e)}), 400
                except Exception:
                    logger.exception("[Analytics API] %s", failure)
                    return jsonify({"success": False, "error": failure}), 500
                return jsonify({"success": True, "data": data, "explanation": explanation})

            return wrapper

        return decorator

    def _target_date(value: Optional[str]) -> date:
        return parse_iso_date(value) if value else formulas.today()

    @app.route("/api/analytics/tee-metrics", methods=["GET"], endpoint="analytics_tee_metrics")
    @json_endpoint(
        "AA1-AA7: average and MA1-MA7: maximum unique punch-ins per weekday over the lookback window; "
        "TEE for a date is the MA value of its weekday",
        "Failed to calculate TEE metrics",
    )
    def tee_metrics():
        reference = request.args.get("reference_date")
        return formulas.calculate_tee_metrics(parse_iso_date(reference) if reference else None).to_dict()

    @app.route("/api/analytics/absentees", methods=["GET"], endpoint="analytics_absentees_today")
    @app.route("/api/analytics/absentees/<day>", methods=["GET"], endpoint="analytics_absentees")
    @json_endpoint(
        "Absentees = TEE (maximum expected for day of week) - actual unique punch-ins",
        "Failed to calculate absentees",
    )
    def absentees(day: Optional[str] = None):
        target = _target_date(day)
        actual = require_non_negative_int(request.args.get("actual_punch_ins"), "actual_punch_ins")
        if actual is None:
            actual = formulas.count_unique_check_ins(target)
        return formulas.calculate_absentees(target, actual)

    @app.route("/api/analytics/attendance-rate", methods=["GET"], endpoint="analytics_attendance_rate")
    @json_endpoint(
        "Attendance Rate = (Present Employees / Total Expected) * 100",
        "Failed to calculate attendance rate",
    )
    def attendance_rate():
        present = require_non_negative_int(request.args.get("present"), "present")
        total = require_non_negative_int(request.args.get("total"), "total")
        if present is None or total is None:
            raise ValidationError("present and total are required")
        return formulas.calculate_attendance_rate(present, total)

    @app.route("/api/analytics/late-arrivals", methods=["GET"], endpoint="analytics_late_arrivals_today")
    @app.route("/api/analytics/late-arrivals/<day>", methods=["GET"], endpoint="analytics_late_arrivals")
    @json_endpoint(
        "Late arrivals are check-ins after the standard start time plus the grace period",
        "Failed to calculate late arrivals",
    )
    def late_arrivals(day: Optional[str] = None):
        return formulas.calculate_late_arrivals(_target_date(day))

    @app.route("/api/analytics/missed-punchouts", methods=["GET"], endpoint="analytics_missed_punchouts_today")
    @app.route("/api/analytics/missed-punchouts/<day>", methods=["GET"], endpoint="analytics_missed_punchouts")
    @json_endpoint(
        "Missed punch-outs = employees with check-in but no check-out",
        "Failed to calculate missed punchouts",
    )
    def missed_punchouts(day: Optional[str] = None):
        return formulas.calculate_missed_punchouts(_target_date(day))

    @app.route("/api/analytics/working-hours", methods=["GET"], endpoint="analytics_working_hours_today")
    @app.route("/api/analytics/working-hours/<day>", methods=["GET"], endpoint="analytics_working_hours")
    @json_endpoint(
        "Working hours calculated from check-in to check-out time difference",
        "Failed to calculate working hours",
    )
    def working_hours(day: Optional[str] = None):
        return formulas.calculate_working_hours(_target_date(day))

    @app.route(
        "/api/analytics/department-breakdown", methods=["GET"], endpoint="analytics_department_breakdown_today"
    )
    @app.route(
        "/api/analytics/department-breakdown/<day>", methods=["GET"], endpoint="analytics_department_breakdown"
    )
    @json_endpoint(
        "Department-wise attendance rates calculated as (Present/Total) * 100",
        "Failed to calculate department breakdown",
    )
    def department_breakdown(day: Optional[str] = None):
        return formulas.calculate_department_analytics(_target_date(day))

    @app.route("/api/analytics/comprehensive", methods=["GET"], endpoint="analytics_comprehensive_today")
    @app.route("/api/analytics/comprehensive/<day>", methods=["GET"], endpoint="analytics_comprehensive")
    @json_endpoint(
        "Comprehensive analytics combining TEE, absentee, timing, hours and department formulas",
        "Failed to generate comprehensive analytics",
    )
    def comprehensive(day: Optional[str] = None):
        return formulas.get_comprehensive_analytics(_target_date(day))
