"""Planning engine: targets, slots, slot allocation and capacity."""

from sewline.planning.allocation import allocate, cumulative
from sewline.planning.capacity import (
    assign_capacities,
    capacity_for_operator_multi_operation,
    capacity_from_samples,
)
from sewline.planning.planner import LinePlanner, RunPlan
from sewline.planning.slots import build_slots, total_hours
from sewline.planning.targets import (
    Target,
    calculate_target,
    compute_target,
    compute_target_per_hour,
)

__all__ = [
    # Planner
    "LinePlanner",
    "RunPlan",
    # Targets
    "Target",
    "calculate_target",
    "compute_target",
    "compute_target_per_hour",
    # Slots
    "build_slots",
    "total_hours",
    "allocate",
    "cumulative",
    # Capacity
    "assign_capacities",
    "capacity_for_operator_multi_operation",
    "capacity_from_samples",
]
