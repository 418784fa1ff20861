"""Performance analysis, alerting and reporting over production runs."""

from sewline.analysis.alerts import AlertEngine
from sewline.analysis.performance import (
    OperatorPerformance,
    SlotProgress,
    hourly_progress,
    operator_performance,
)
from sewline.analysis.reporting import (
    RunSummary,
    classify_line_status,
    fleet_totals,
    summarize_fleet,
    summarize_run,
)

__all__ = [
    "AlertEngine",
    "OperatorPerformance",
    "SlotProgress",
    "hourly_progress",
    "operator_performance",
    "RunSummary",
    "classify_line_status",
    "fleet_totals",
    "summarize_fleet",
    "summarize_run",
]
