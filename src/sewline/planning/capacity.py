"""
Capacity Calculation Functions

Converts time-study samples (seconds per piece, up to five per operation)
into a pieces-per-hour capacity.

Two rules exist:
- Single operation: 3600 / mean of the present, positive samples.
- Operator running several operations: 3600 / (sum of every sample of every
  operation / 5). The divisor is the number of time-study columns, not the
  number of samples or operations.
"""

import logging
from collections import defaultdict
from typing import Any, Iterable, Union

from sewline.domain.models import SAMPLE_COUNT, OperatorOperation
from sewline.domain.numeric import safe_number

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


def capacity_from_samples(*samples: Any) -> float:
    """
    Calculate capacity per hour for a single operation.

    Args:
        *samples: Up to five time-study samples in seconds; None or
                  non-positive values are ignored

    Returns:
        Pieces per hour, or 0.0 when no usable sample exists

    Example:
        >>> capacity_from_samples(60, 60, 60, 60, 60)
        60.0
        >>> capacity_from_samples(None, 30, "", 0, 90)
        60.0
    """
    present = [safe_number(s) for s in samples[:SAMPLE_COUNT]]
    present = [s for s in present if s > 0]
    if not present:
        return 0.0

    avg_seconds = sum(present) / len(present)
    return SECONDS_PER_HOUR / avg_seconds


def _samples_of(operation: Union[OperatorOperation, dict]) -> Iterable[Any]:
    if isinstance(operation, OperatorOperation):
        return operation.samples
    return [operation.get(f"t{i}") for i in range(1, SAMPLE_COUNT + 1)]


def capacity_for_operator_multi_operation(
    operations: Iterable[Union[OperatorOperation, dict]],
) -> float:
    """
    Calculate capacity per hour for an operator running several operations.

    Every sample of every operation is summed, treating missing samples as
    0, and the total is normalized by the five time-study columns.

    Args:
        operations: OperatorOperation objects or dicts with keys t1..t5

    Returns:
        Pieces per hour, or 0.0 when the samples sum to nothing

    Example:
        >>> ops = [{'t1': 60, 't2': 60, 't3': 60, 't4': 60, 't5': 60}] * 2
        >>> capacity_for_operator_multi_operation(ops)
        30.0
    """
    total_seconds = sum(
        safe_number(sample) for op in operations for sample in _samples_of(op)
    )
    if total_seconds <= 0:
        return 0.0

    time_per_piece_seconds = total_seconds / SAMPLE_COUNT
    return SECONDS_PER_HOUR / time_per_piece_seconds


def assign_capacities(
    operations: list[OperatorOperation],
) -> list[OperatorOperation]:
    """
    Recompute capacity for every operation of a run.

    Operators with two or more operations get the multi-operation capacity on
    all of their rows so their capacity reads the same on each operation;
    other rows use the single-operation rule.

    Args:
        operations: Operations of a run

    Returns:
        New OperatorOperation list, same order, with capacity_per_hour set
    """
    by_operator = defaultdict(list)
    for op in operations:
        by_operator[op.operator_no].append(op)

    shared = {
        operator_no: capacity_for_operator_multi_operation(ops)
        for operator_no, ops in by_operator.items()
        if len(ops) >= 2
    }
    if shared:
        logger.debug("Operators using shared capacity: %s", sorted(shared))

    result = []
    for op in operations:
        if op.operator_no in shared:
            capacity = shared[op.operator_no]
        else:
            capacity = capacity_from_samples(*op.samples)
        result.append(op.with_capacity(capacity))
    return result
