"""Shift slot generation.

Partitions the working hours of a day into a fixed, labeled slot pattern:
one slot per full hour from the start hour to the end hour, plus a short
trailing slot. The pattern is scaled so the slot hours add up to exactly
the working hours of the run.
"""

import logging
from typing import Any, Optional

from sewline.domain.models import ShiftSlot
from sewline.domain.numeric import round2, safe_number
from sewline.domain.policies import SlotBuildConfig

logger = logging.getLogger(__name__)


def slot_labels(config: SlotBuildConfig) -> list[str]:
    """Labels of the slot pattern, in day order."""
    labels = [str(h) for h in range(config.start_hour, config.end_hour + 1)]
    labels.append(config.trailing_label)
    return labels


def base_weight(label: str, config: SlotBuildConfig) -> float:
    """Unscaled hours of a slot before fitting to the working hours."""
    if label == config.trailing_label:
        return config.last_slot_hours
    hour = int(label.split(":")[0])
    if hour == config.start_hour:
        return config.first_slot_hours
    if hour == config.lunch_hour:
        return config.lunch_slot_hours
    return 1.0


def build_slots(
    working_hours: Any,
    config: Optional[SlotBuildConfig] = None,
) -> list[ShiftSlot]:
    """Build the slot list for a day.

    Each slot's hours are its base weight scaled by
    ``working_hours / sum(base weights)`` and rounded to 2 decimals. Any
    rounding drift left over is added to the last slot so that the slot
    hours sum to ``working_hours``. For very short days a negative drift
    larger than the last slot is taken from the slots before it, so no slot
    drops below zero.

    Args:
        working_hours: Total working hours of the run.
        config: Slot pattern; defaults to the standard 9-17:36 day.

    Returns:
        Ordered slots, or an empty list when there are no working hours.
    """
    config = config or SlotBuildConfig()
    hours = safe_number(working_hours)
    if hours <= 0:
        return []

    labels = slot_labels(config)
    weights = [base_weight(label, config) for label in labels]
    base_sum = sum(weights) or 1
    scale = hours / base_sum

    slot_hours = [round2(w * scale) for w in weights]

    diff = round2(hours - sum(slot_hours))
    if abs(diff) >= 0.01:
        logger.debug("Correcting slot rounding drift of %.2fh on last slot", diff)
        # Slots never go negative; a shortfall the last slot cannot absorb
        # moves back to the earlier slots.
        for i in reversed(range(len(slot_hours))):
            adjusted = max(0.0, round2(slot_hours[i] + diff))
            diff = round2(diff - (adjusted - slot_hours[i]))
            slot_hours[i] = adjusted
            if abs(diff) < 0.01:
                break

    return [
        ShiftSlot(label=label, hours=h, order=i)
        for i, (label, h) in enumerate(zip(labels, slot_hours), start=1)
    ]


def total_hours(slots: list[ShiftSlot]) -> float:
    """Sum of planned hours across slots."""
    return sum(safe_number(s.hours) for s in slots)
