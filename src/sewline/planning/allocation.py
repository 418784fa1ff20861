"""Distribution of a run's piece target across its shift slots."""

import logging
from typing import Any

from sewline.domain.models import ShiftSlot, SlotTarget
from sewline.domain.numeric import round2, safe_number
from sewline.planning.slots import total_hours

logger = logging.getLogger(__name__)


def allocate(target: Any, slots: list[ShiftSlot]) -> list[SlotTarget]:
    """Allocate a piece target across slots in proportion to slot hours.

    ``slot_target = round2(target / total_hours * slot.hours)``, and the
    cumulative target is the running sum of slot targets, rounded and
    clamped to the overall target. The last slot closes the curve at the
    target exactly, absorbing any shortfall left by rounding.

    Args:
        target: Total piece target of the run.
        slots: Ordered slots; their order defines the cumulative curve.

    Returns:
        One SlotTarget per slot, aligned positionally with ``slots``.
    """
    goal = max(safe_number(target), 0.0)
    hours = total_hours(slots)
    per_hour = goal / hours if hours > 0 else 0.0

    slot_targets = [round2(per_hour * safe_number(s.hours)) for s in slots]

    allocated = []
    running = 0.0
    for slot, slot_target in zip(slots, slot_targets):
        running += slot_target
        cumulative = min(goal, round2(running))
        allocated.append(
            SlotTarget(
                label=slot.label,
                slot_target=slot_target,
                cumulative_target=cumulative,
            )
        )

    if allocated and per_hour > 0 and allocated[-1].cumulative_target != goal:
        last = allocated[-1]
        logger.debug(
            "Closing cumulative curve at %.4f (was %.2f)",
            goal,
            last.cumulative_target,
        )
        allocated[-1] = SlotTarget(
            label=last.label,
            slot_target=last.slot_target,
            cumulative_target=goal,
        )

    return allocated


def cumulative(values: list[Any]) -> list[float]:
    """Running totals of a sequence of quantities."""
    totals = []
    running = 0.0
    for value in values:
        running += safe_number(value)
        totals.append(running)
    return totals
