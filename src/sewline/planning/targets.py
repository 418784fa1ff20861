"""
Target Calculation Functions

Derives the piece target of a run from its SAM and efficiency drivers:

    target = operators × hours × 60 / SAM × efficiency

A run whose drivers are not all filled in yet has a target of 0.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sewline.domain.models import RunParameters
from sewline.domain.numeric import safe_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """Container for target calculation results"""
    pieces_target: float
    pieces_per_hour: float

    def to_dict(self) -> dict:
        """Convert to dictionary for easy display"""
        return {
            'piecesTarget': self.pieces_target,
            'piecesPerHour': self.pieces_per_hour,
        }


def compute_target(
    operator_count: Any,
    working_hours: Any,
    sam_minutes: Any,
    efficiency: Any,
) -> float:
    """
    Calculate the piece target of a run.

    Args:
        operator_count: Operators on the line
        working_hours: Working hours for the day (e.g. 8.85)
        sam_minutes: Standard allowed minutes per piece
        efficiency: Efficiency as a fraction (0.7 for 70%)

    Returns:
        Pieces target, or 0.0 if any driver is missing or not positive

    Example:
        >>> round(compute_target(25, 8.85, 18.5, 0.7), 2)
        502.3
    """
    operators = safe_number(operator_count)
    hours = safe_number(working_hours)
    sam = safe_number(sam_minutes)
    eff = safe_number(efficiency)

    if operators <= 0 or hours <= 0 or sam <= 0 or eff <= 0:
        return 0.0

    total_minutes_available = operators * hours * 60
    pieces_at_100_pct = total_minutes_available / sam
    return pieces_at_100_pct * eff


def compute_target_per_hour(target: Any, working_hours: Any) -> float:
    """
    Calculate the per-hour target.

    Args:
        target: Pieces target for the run
        working_hours: Working hours for the day

    Returns:
        target / working_hours, or 0.0 without working hours
    """
    hours = safe_number(working_hours)
    if hours <= 0:
        return 0.0
    return safe_number(target) / hours


def calculate_target(params: RunParameters) -> Target:
    """Calculate target and per-hour target for a run."""
    pieces = compute_target(
        params.operator_count,
        params.working_hours,
        params.sam_minutes,
        params.efficiency,
    )
    if pieces == 0:
        logger.debug(
            "Line %s run has incomplete drivers, target is 0", params.line_no
        )

    return Target(
        pieces_target=pieces,
        pieces_per_hour=compute_target_per_hour(pieces, params.working_hours),
    )
