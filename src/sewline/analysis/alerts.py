"""Alert classification for planned vs. actual output.

Alerts are recomputed from the current performance rows on every read;
they carry no identity of their own and are never persisted.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from sewline.analysis.performance import OperatorPerformance, operator_performance
from sewline.domain.models import Alert, AlertType, ProductionRun, Severity
from sewline.domain.policies import AlertPolicy, DefaultAlertPolicy, VariancePolicy

logger = logging.getLogger(__name__)


def _qty(value: float) -> str:
    return f"{value:g}"


class AlertEngine:
    """Classifies performance rows into severity-tagged alerts.

    Each row is checked independently against every rule, so one row may
    raise several alerts. Results are sorted HIGH, MEDIUM, LOW; alerts keep
    their input order within a severity.

    Example:
        >>> engine = AlertEngine()
        >>> alerts = engine.evaluate_run(run)
        >>> for alert in alerts:
        ...     print(alert.severity.value, alert.message)
    """

    def __init__(self, policy: Optional[AlertPolicy] = None):
        """Initialize engine with alert thresholds.

        Args:
            policy: Alert classification policy.
        """
        self.policy = policy or DefaultAlertPolicy()

    @property
    def variance_policy(self) -> VariancePolicy:
        return getattr(self.policy, "variance_policy", VariancePolicy.SUPPRESS)

    def evaluate_run(
        self,
        run: ProductionRun,
        timestamp: Optional[datetime] = None,
    ) -> list[Alert]:
        """Evaluate alerts for every operation of a run."""
        return self.evaluate(operator_performance(run), timestamp)

    def evaluate(
        self,
        rows: Iterable[OperatorPerformance],
        timestamp: Optional[datetime] = None,
    ) -> list[Alert]:
        """Evaluate alerts for performance rows.

        Args:
            rows: Per-operation performance rows.
            timestamp: Time stamped on the alerts; defaults to now.

        Returns:
            Alerts sorted by severity.
        """
        timestamp = timestamp or datetime.now()
        alerts = []
        for row in rows:
            alerts.extend(self._evaluate_row(row, timestamp))

        alerts.sort(key=lambda a: a.severity.rank)
        if alerts:
            logger.info(
                "%d alerts (%d high)",
                len(alerts),
                sum(1 for a in alerts if a.severity is Severity.HIGH),
            )
        return alerts

    def _evaluate_row(
        self,
        row: OperatorPerformance,
        timestamp: datetime,
    ) -> list[Alert]:
        """Apply every rule to a single row."""
        found = []
        who = f"Operator {row.operator_no} ({row.operator_name})"
        context = dict(
            operator_no=row.operator_no,
            operator_name=row.operator_name,
            operation_name=row.operation_name,
            style=row.style,
            timestamp=timestamp,
        )
        variance = row.variance
        planned = row.planned_qty

        if row.sewed_qty == 0 and planned > 0:
            found.append(
                Alert(
                    type=AlertType.NO_PRODUCTION,
                    severity=Severity.HIGH,
                    planned_qty=planned,
                    message=f"{who} has zero production for {row.operation_name}",
                    **context,
                )
            )

        critical = self.policy.is_critical_variance(variance, planned)
        if critical:
            pct = abs(variance) / planned * 100.0 if planned > 0 else 100.0
            found.append(
                Alert(
                    type=AlertType.CRITICAL_VARIANCE,
                    severity=Severity.HIGH,
                    planned_qty=planned,
                    sewed_qty=row.sewed_qty,
                    variance=variance,
                    variance_pct=round(pct, 1),
                    message=(
                        f"CRITICAL: {who} is {pct:.1f}% below target "
                        f"for {row.operation_name}"
                    ),
                    **context,
                )
            )

        severity = self.policy.variance_severity(variance, planned)
        if severity and not (critical and self.variance_policy is VariancePolicy.SUPPRESS):
            found.append(
                Alert(
                    type=AlertType.VARIANCE,
                    severity=severity,
                    planned_qty=planned,
                    sewed_qty=row.sewed_qty,
                    variance=variance,
                    efficiency=row.efficiency,
                    capacity_per_hour=row.capacity_per_hour,
                    message=(
                        f"{who} is {_qty(abs(variance))} pieces below target "
                        f"for {row.operation_name}"
                    ),
                    **context,
                )
            )

        efficiency = row.efficiency
        severity = self.policy.efficiency_severity(efficiency)
        if severity:
            level = "very low" if severity is Severity.HIGH else "low"
            found.append(
                Alert(
                    type=AlertType.EFFICIENCY,
                    severity=severity,
                    efficiency=efficiency,
                    capacity_per_hour=row.capacity_per_hour,
                    message=(
                        f"{who} has {level} efficiency of {efficiency * 100:.1f}% "
                        f"for {row.operation_name}"
                    ),
                    **context,
                )
            )

        return found
