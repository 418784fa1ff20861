"""
Production Reporting

Aggregates runs into run-level summaries and per-line daily roll-ups for
supervisor dashboards.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from sewline.domain.models import LineStatus, ProductionRun
from sewline.domain.policies import DefaultStatusPolicy, StatusPolicy

logger = logging.getLogger(__name__)

FLEET_COLUMNS = [
    'line_no',
    'runs',
    'styles',
    'operators',
    'operations',
    'target',
    'sewed',
    'capacity_per_hour',
    'efficiency',
    'variance',
    'variance_pct',
    'achievement_pct',
    'status',
]


def achievement_pct(sewed: float, target: float) -> float:
    """Sewed output as a percentage of target (0 without target)"""
    if target <= 0:
        return 0.0
    return sewed / target * 100.0


def variance_pct(sewed: float, target: float) -> float:
    """(sewed - target) as a percentage of target (0 without target)"""
    if target <= 0:
        return 0.0
    return (sewed - target) / target * 100.0


def efficiency(sewed: float, capacity_per_hour: float) -> float:
    """Sewed output relative to capacity per hour (0 without capacity)"""
    if capacity_per_hour <= 0:
        return 0.0
    return sewed / capacity_per_hour


def classify_line_status(
    sewed: float,
    target: float,
    policy: Optional[StatusPolicy] = None,
) -> LineStatus:
    """
    Classify a line for dashboard coloring.

    Args:
        sewed: Pieces sewed
        target: Piece target
        policy: Status bands; defaults to DefaultStatusPolicy

    Returns:
        LineStatus for the line's variance percentage
    """
    policy = policy or DefaultStatusPolicy()
    return policy.classify(variance_pct(sewed, target), target)


@dataclass
class RunSummary:
    """Run-level summary for a supervisor dashboard"""
    line_no: str
    run_date: Optional[date]
    style: str
    total_target: float
    total_sewed: float
    operators_count: int
    operations_count: int
    total_capacity_per_hour: float
    status: LineStatus

    @property
    def achievement_pct(self) -> float:
        return achievement_pct(self.total_sewed, self.total_target)

    @property
    def variance(self) -> float:
        return self.total_sewed - self.total_target

    @property
    def variance_pct(self) -> float:
        return variance_pct(self.total_sewed, self.total_target)

    @property
    def overall_efficiency(self) -> float:
        """Total sewed relative to the summed capacity per hour of all operations"""
        return efficiency(self.total_sewed, self.total_capacity_per_hour)

    def to_dict(self) -> dict:
        return {
            'line': self.line_no,
            'date': self.run_date.isoformat() if self.run_date else None,
            'style': self.style,
            'operatorsCount': self.operators_count,
            'operationsCount': self.operations_count,
            'totalTarget': round(self.total_target, 2),
            'totalSewed': self.total_sewed,
            'achievementPct': round(self.achievement_pct, 2),
            'variance': round(self.variance, 2),
            'variancePct': round(self.variance_pct, 2),
            'overallEfficiency': round(self.overall_efficiency, 2),
            'status': self.status.value,
        }


def summarize_run(
    run: ProductionRun,
    status_policy: Optional[StatusPolicy] = None,
) -> RunSummary:
    """
    Summarize a run's output against its target.

    Args:
        run: Production run
        status_policy: Status bands for the run's dashboard status

    Returns:
        RunSummary of the run
    """
    total_sewed = sum(e.quantity for e in run.entries.values())
    total_capacity = sum(op.capacity_per_hour for op in run.operations)

    if run.target <= 0:
        logger.warning("Line %s run has no target", run.params.line_no)

    return RunSummary(
        line_no=run.params.line_no,
        run_date=run.params.run_date,
        style=run.params.style,
        total_target=run.target,
        total_sewed=total_sewed,
        operators_count=len(run.operator_numbers),
        operations_count=len(run.operations),
        total_capacity_per_hour=total_capacity,
        status=classify_line_status(total_sewed, run.target, status_policy),
    )


def _line_sort_key(line_no: str):
    return (0, int(line_no), "") if str(line_no).isdigit() else (1, 0, str(line_no))


def summarize_fleet(
    runs: Iterable[ProductionRun],
    run_date: Optional[date] = None,
    status_policy: Optional[StatusPolicy] = None,
) -> pd.DataFrame:
    """
    Roll runs up into one row per line.

    Args:
        runs: Production runs, possibly spanning several dates
        run_date: Only runs on this date are included when given
        status_policy: Status bands for each line

    Returns:
        DataFrame with FLEET_COLUMNS, one row per line, ordered by line number
    """
    summaries = [
        summarize_run(run, status_policy)
        for run in runs
        if run_date is None or run.params.run_date == run_date
    ]
    if not summaries:
        return pd.DataFrame(columns=FLEET_COLUMNS)

    df = pd.DataFrame([
        {
            'line_no': s.line_no,
            'style': s.style,
            'operators': s.operators_count,
            'operations': s.operations_count,
            'target': s.total_target,
            'sewed': s.total_sewed,
            'capacity_per_hour': s.total_capacity_per_hour,
        }
        for s in summaries
    ])

    grouped = df.groupby('line_no', sort=False).agg(
        runs=('style', 'size'),
        styles=('style', lambda x: ", ".join(sorted(set(v for v in x if v)))),
        operators=('operators', 'sum'),
        operations=('operations', 'sum'),
        target=('target', 'sum'),
        sewed=('sewed', 'sum'),
        capacity_per_hour=('capacity_per_hour', 'sum'),
    ).reset_index()

    grouped['efficiency'] = [
        efficiency(s, c) for s, c in zip(grouped['sewed'], grouped['capacity_per_hour'])
    ]
    grouped['variance'] = grouped['sewed'] - grouped['target']
    grouped['variance_pct'] = [
        variance_pct(s, t) for s, t in zip(grouped['sewed'], grouped['target'])
    ]
    grouped['achievement_pct'] = [
        achievement_pct(s, t) for s, t in zip(grouped['sewed'], grouped['target'])
    ]
    grouped['status'] = [
        classify_line_status(s, t, status_policy).value
        for s, t in zip(grouped['sewed'], grouped['target'])
    ]

    order = sorted(grouped.index, key=lambda i: _line_sort_key(grouped.at[i, 'line_no']))
    return grouped.loc[order, FLEET_COLUMNS].reset_index(drop=True)


def fleet_totals(fleet: pd.DataFrame) -> dict:
    """
    Totals across every line of a fleet roll-up.

    Args:
        fleet: DataFrame returned by summarize_fleet

    Returns:
        Dictionary with line count, target, sewed, achievement, efficiency
        and status counts
    """
    if fleet.empty:
        return {
            'total_lines': 0,
            'total_target': 0.0,
            'total_sewed': 0.0,
            'achievement_pct': 0.0,
            'variance_pct': 0.0,
            'efficiency': 0.0,
            'status_counts': {},
        }

    total_target = float(fleet['target'].sum())
    total_sewed = float(fleet['sewed'].sum())
    total_capacity = float(fleet['capacity_per_hour'].sum())
    return {
        'total_lines': int(len(fleet)),
        'total_target': total_target,
        'total_sewed': total_sewed,
        'achievement_pct': achievement_pct(total_sewed, total_target),
        'efficiency': efficiency(total_sewed, total_capacity),
        'variance_pct': variance_pct(total_sewed, total_target),
        'status_counts': fleet['status'].value_counts().to_dict(),
    }
