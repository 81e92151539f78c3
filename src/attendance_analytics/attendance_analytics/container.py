from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .core.settings import AnalyticsSettings
from .database.connection import DBConfig, DatabaseConnection
from .formulas.rules import ShiftRules
from .formulas.service import AnalyticsFormulaService
from .metrics.calculator.standard_calculator import StandardMetricsCalculator
from .metrics.mysql_unified_metrics_repository import MySQLUnifiedMetricsRepository
from .recalculation.progress_store import JsonFileProgressStore
from .recalculation.service import UnifiedMetricsRecalculator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: AnalyticsSettings
    rules: ShiftRules

    attendance_repo: MySQLAttendanceRepository
    metrics_repo: MySQLUnifiedMetricsRepository
    progress_store: JsonFileProgressStore

    formula_service: AnalyticsFormulaService
    metrics_calculator: StandardMetricsCalculator
    recalculator: UnifiedMetricsRecalculator


def build_container(*, db_config: dict, settings: AnalyticsSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    rules = ShiftRules.from_settings(settings)

    attendance_repo = MySQLAttendanceRepository(conn)
    metrics_repo = MySQLUnifiedMetricsRepository(conn)
    progress_store = JsonFileProgressStore(settings.progress_file)

    formula_service = AnalyticsFormulaService(
        attendance_repo,
        rules=rules,
        fallback_total_employees=settings.fallback_total_employees,
        lookback_days=settings.tee_lookback_days,
    )
    metrics_calculator = StandardMetricsCalculator(
        rules,
        absent_productivity_score=settings.absent_productivity_score,
    )
    recalculator = UnifiedMetricsRecalculator(
        attendance_repo,
        metrics_repo,
        progress_store,
        metrics_calculator,
        tz=rules.tz,
        checkpoint_every_days=settings.checkpoint_every_days,
    )

    return Container(
        conn=conn,
        settings=settings,
        rules=rules,
        attendance_repo=attendance_repo,
        metrics_repo=metrics_repo,
        progress_store=progress_store,
        formula_service=formula_service,
        metrics_calculator=metrics_calculator,
        recalculator=recalculator,
    )
