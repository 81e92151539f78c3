from __future__ import annotations

import logging
import threading

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container
from .model import RecalculationOptions

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    settings = container.settings
    # At most one run per process: every run writes the same checkpoint file.
    run_lock = threading.Lock()

    @app.route("/api/admin/unified-metrics/recalculate", methods=["POST"], endpoint="unified_metrics_recalculate")
    def recalculate():
        payload = request.get_json(silent=True) or {}
        try:
            options = RecalculationOptions.from_payload(
                payload,
                today=container.formula_service.today(),
                max_range_days=settings.max_range_days,
            )
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        if not run_lock.acquire(blocking=False):
            return jsonify({"success": False, "error": "A recalculation is already running"}), 409
        try:
            # run() reports failures in the summary instead of raising.
            summary = container.recalculator.run(options)
        finally:
            run_lock.release()
        return jsonify(summary.to_dict())

    @app.route("/api/admin/unified-metrics/progress", methods=["GET"], endpoint="unified_metrics_progress")
    def progress():
        current = container.recalculator.load_progress()
        if current is None:
            return jsonify({"success": False, "error": "No recalculation has been recorded"}), 404
        return jsonify({"success": True, "data": current.to_dict()})
