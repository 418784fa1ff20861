"""Main planning interface.

This module provides the high-level LinePlanner class that orchestrates
target calculation, slot building, slot allocation and capacity
assignment for a production run.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sewline.domain.models import (
    DEFAULT_EFFICIENCY,
    HourlyEntry,
    OperatorOperation,
    ProductionRun,
    RunParameters,
    ShiftSlot,
    SlotTarget,
)
from sewline.domain.numeric import safe_number
from sewline.domain.policies import SlotBuildConfig
from sewline.planning.allocation import allocate
from sewline.planning.capacity import assign_capacities
from sewline.planning.slots import build_slots
from sewline.planning.targets import Target, calculate_target

logger = logging.getLogger(__name__)


@dataclass
class RunPlan:
    """Derived plan of a run: target, slots and the hourly target curve."""

    params: RunParameters
    target: Target
    slots: list[ShiftSlot] = field(default_factory=list)
    slot_targets: list[SlotTarget] = field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        """True when the run has a target and slots to allocate it over."""
        return self.target.pieces_target > 0 and len(self.slots) > 0

    def to_dict(self) -> dict:
        return {
            "run": self.params.to_dict(),
            **self.target.to_dict(),
            "slots": [s.to_dict() for s in self.slots],
            "slotTargets": [t.to_dict() for t in self.slot_targets],
        }


class LinePlanner:
    """High-level planner for production runs.

    Example:
        >>> planner = LinePlanner()
        >>> params = RunParameters(
        ...     line_no="7", operator_count=25, working_hours=8.85,
        ...     sam_minutes=18.5, efficiency=0.7,
        ... )
        >>> plan = planner.plan(params)
        >>> round(plan.target.pieces_target, 2)
        502.3
    """

    def __init__(
        self,
        slot_config: Optional[SlotBuildConfig] = None,
        default_efficiency: float = DEFAULT_EFFICIENCY,
    ):
        """Initialize planner.

        Args:
            slot_config: Slot pattern used when a run has no stored slots.
            default_efficiency: Efficiency assumed when a record omits it.
        """
        self.slot_config = slot_config or SlotBuildConfig()
        self.default_efficiency = default_efficiency

    def plan(
        self,
        params: RunParameters,
        slots: Optional[list[ShiftSlot]] = None,
    ) -> RunPlan:
        """Derive target, slots and slot targets for run parameters.

        Args:
            params: Run parameters.
            slots: Existing slots of the run. Built from the working hours
                   when omitted.

        Returns:
            RunPlan with every derived value.
        """
        target = calculate_target(params)
        if slots is None:
            slots = build_slots(params.working_hours, self.slot_config)
        slot_targets = allocate(target.pieces_target, slots)

        logger.debug(
            "Planned line %s: target=%.2f over %d slots",
            params.line_no,
            target.pieces_target,
            len(slots),
        )
        return RunPlan(
            params=params,
            target=target,
            slots=list(slots),
            slot_targets=slot_targets,
        )

    def build_run(
        self,
        params: RunParameters,
        operations: Iterable[OperatorOperation] = (),
        entries: Iterable[HourlyEntry] = (),
        slots: Optional[list[ShiftSlot]] = None,
    ) -> ProductionRun:
        """Build a production run with derived values filled in.

        Capacities are recomputed from the time-study samples, and entries
        are recorded in order so later entries for the same slot win.
        """
        plan = self.plan(params, slots)
        run = ProductionRun(
            params=params,
            target=plan.target.pieces_target,
            target_per_hour=plan.target.pieces_per_hour,
            slots=plan.slots,
            slot_targets=plan.slot_targets,
            operations=assign_capacities(list(operations)),
        )
        for entry in entries:
            run.record_entry(entry)
        return run

    def load_run(self, record: dict) -> ProductionRun:
        """Build a production run from a stored or submitted record.

        The record holds a ``run`` mapping of parameters and optional
        ``slots``, ``operations`` and ``entries`` lists.
        """
        params = RunParameters.from_record(
            record.get("run", {}), default_efficiency=self.default_efficiency
        )

        slots = None
        if record.get("slots"):
            slots = [
                ShiftSlot(
                    label=str(s.get("label", s.get("slot_label", ""))),
                    hours=safe_number(s.get("hours", s.get("planned_hours"))),
                    order=i,
                )
                for i, s in enumerate(record["slots"], start=1)
            ]

        operations = [
            OperatorOperation.from_record(r) for r in record.get("operations", [])
        ]
        entries = [HourlyEntry.from_record(r) for r in record.get("entries", [])]
        return self.build_run(params, operations, entries, slots)
