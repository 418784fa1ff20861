"""
Performance Calculation Functions

Rolls hourly entries up into per-operation performance rows and per-slot
progress against the cumulative target curve.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from sewline.domain.models import ProductionRun

logger = logging.getLogger(__name__)


@dataclass
class OperatorPerformance:
    """Planned vs. actual output of one operator on one operation"""
    operator_no: int
    operator_name: str
    operation_name: str
    planned_qty: float       # sum of stitched quantities
    sewed_qty: float         # sum of actual sewed quantities
    capacity_per_hour: float
    style: Optional[str] = None

    @property
    def variance(self) -> float:
        """Sewed minus planned pieces"""
        return self.sewed_qty - self.planned_qty

    @property
    def variance_pct(self) -> float:
        """Variance as a percentage of the planned quantity"""
        if self.planned_qty <= 0:
            return 0.0
        return self.variance / self.planned_qty * 100.0

    @property
    def efficiency(self) -> float:
        """Sewed pieces relative to capacity per hour (0 without capacity)"""
        if self.capacity_per_hour <= 0:
            return 0.0
        return self.sewed_qty / self.capacity_per_hour

    def to_dict(self) -> dict:
        return {
            'operatorNo': self.operator_no,
            'operatorName': self.operator_name,
            'operationName': self.operation_name,
            'style': self.style,
            'plannedQty': self.planned_qty,
            'sewedQty': self.sewed_qty,
            'variance': self.variance,
            'capacityPerHour': self.capacity_per_hour,
            'efficiency': round(self.efficiency, 2),
        }


@dataclass
class SlotProgress:
    """Target vs. actual output of the whole run within one slot"""
    label: str
    hours: float
    slot_target: float
    cumulative_target: float
    sewed_qty: float
    cumulative_sewed: float
    stitched_qty: float = 0.0

    @property
    def cumulative_variance(self) -> float:
        """Cumulative sewed minus cumulative target"""
        return self.cumulative_sewed - self.cumulative_target

    def to_dict(self) -> dict:
        return {
            'label': self.label,
            'hours': self.hours,
            'slotTarget': self.slot_target,
            'cumulativeTarget': self.cumulative_target,
            'sewedQty': self.sewed_qty,
            'cumulativeSewed': self.cumulative_sewed,
            'stitchedQty': self.stitched_qty,
            'cumulativeVariance': self.cumulative_variance,
        }


def operator_performance(run: ProductionRun) -> list[OperatorPerformance]:
    """
    Build one performance row per operation of a run.

    Args:
        run: Production run with operations and entries

    Returns:
        Rows in operation order
    """
    rows = []
    for op in run.operations:
        entries = run.entries_for(op)
        rows.append(
            OperatorPerformance(
                operator_no=op.operator_no,
                operator_name=op.display_name,
                operation_name=op.operation_name,
                planned_qty=sum(e.stitched_qty for e in entries),
                sewed_qty=sum(e.quantity for e in entries),
                capacity_per_hour=op.capacity_per_hour,
                style=run.params.style or None,
            )
        )
    return rows


def hourly_progress(run: ProductionRun) -> list[SlotProgress]:
    """
    Compare the run's output per slot against its cumulative target curve.

    Entries recorded against a label that is not one of the run's slots are
    left out of the progress table.

    Args:
        run: Production run with slots, slot targets and entries

    Returns:
        One SlotProgress per slot, in slot order
    """
    sewed = defaultdict(float)
    stitched = defaultdict(float)
    labels = set(run.slot_labels)

    for entry in run.entries.values():
        if entry.slot_label not in labels:
            logger.warning(
                "Entry for operator %s / %s references unknown slot '%s'",
                entry.operator_no,
                entry.operation_name,
                entry.slot_label,
            )
            continue
        sewed[entry.slot_label] += entry.quantity
        stitched[entry.slot_label] += entry.stitched_qty

    targets = {t.label: t for t in run.slot_targets}
    progress = []
    running = 0.0
    for slot in run.slots:
        running += sewed[slot.label]
        target = targets.get(slot.label)
        progress.append(
            SlotProgress(
                label=slot.label,
                hours=slot.hours,
                slot_target=target.slot_target if target else 0.0,
                cumulative_target=target.cumulative_target if target else 0.0,
                sewed_qty=sewed[slot.label],
                cumulative_sewed=running,
                stitched_qty=stitched[slot.label],
            )
        )
    return progress
