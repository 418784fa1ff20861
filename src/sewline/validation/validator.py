"""Validation module for verifying production run consistency.

This module provides a single source of truth for the structural invariants
of a run: slot hours adding up to the working hours, a monotonic cumulative
target curve, and hourly entries that reference known slots and operations.
Problems are reported, never raised.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sewline.domain.models import ProductionRun
from sewline.planning.slots import total_hours

# Tolerance for slot hours and curve comparisons (2-decimal rounding).
TOLERANCE = 0.01


class ValidationErrorType(Enum):
    """Types of validation errors."""

    SLOT_HOURS_MISMATCH = "slot_hours_mismatch"
    NEGATIVE_SLOT_HOURS = "negative_slot_hours"
    DUPLICATE_SLOT_LABEL = "duplicate_slot_label"
    MISSING_SLOTS = "missing_slots"
    SLOT_TARGETS_MISALIGNED = "slot_targets_misaligned"
    CUMULATIVE_DECREASING = "cumulative_decreasing"
    CUMULATIVE_EXCEEDS_TARGET = "cumulative_exceeds_target"
    CUMULATIVE_NOT_CLOSED = "cumulative_not_closed"
    DUPLICATE_OPERATION = "duplicate_operation"
    UNKNOWN_SLOT = "unknown_slot"
    UNKNOWN_OPERATION = "unknown_operation"
    NEGATIVE_QUANTITY = "negative_quantity"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    operator_no: Optional[int] = None
    slot_label: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.operator_no is not None:
            parts.append(f"Operator {self.operator_no}:")
        parts.append(self.message)
        if self.slot_label is not None:
            parts.append(f"(slot {self.slot_label})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a run."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def has_error(self, error_type: ValidationErrorType) -> bool:
        return any(e.error_type == error_type for e in self.errors)


class PlanValidator:
    """Validates production runs against their invariants.

    Example:
        >>> validator = PlanValidator()
        >>> result = validator.validate(run)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(self, run: ProductionRun) -> ValidationResult:
        """Validate a complete run.

        Args:
            run: The run to validate.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        self._validate_slots(run, result)
        self._validate_curve(run, result)
        self._validate_operations(run, result)
        self._validate_entries(run, result)

        if run.target <= 0:
            result.add_warning(
                "Run has no target: operators, hours, SAM and efficiency "
                "must all be positive"
            )

        return result

    def _validate_slots(self, run: ProductionRun, result: ValidationResult) -> None:
        """Check slot hours against the run's working hours."""
        working_hours = run.params.working_hours

        if not run.slots:
            if working_hours > 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.MISSING_SLOTS,
                        message=f"Run has {working_hours}h but no slots",
                    )
                )
            return

        for slot in run.slots:
            if slot.hours < 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NEGATIVE_SLOT_HOURS,
                        message=f"Slot has negative hours ({slot.hours})",
                        slot_label=slot.label,
                    )
                )

        for label, count in Counter(run.slot_labels).items():
            if count > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_SLOT_LABEL,
                        message=f"Slot label appears {count} times",
                        slot_label=label,
                    )
                )

        hours = total_hours(run.slots)
        if abs(hours - working_hours) >= TOLERANCE:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SLOT_HOURS_MISMATCH,
                    message=(
                        f"Slot hours sum to {hours:.2f} but working hours "
                        f"are {working_hours:.2f}"
                    ),
                    details={"slot_hours": hours, "working_hours": working_hours},
                )
            )

    def _validate_curve(self, run: ProductionRun, result: ValidationResult) -> None:
        """Check the cumulative target curve is non-decreasing and closed."""
        if not run.slot_targets:
            return

        if [t.label for t in run.slot_targets] != run.slot_labels:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SLOT_TARGETS_MISALIGNED,
                    message="Slot targets do not line up with the run's slots",
                )
            )

        previous = 0.0
        for slot_target in run.slot_targets:
            cumulative = slot_target.cumulative_target
            if cumulative < previous - TOLERANCE:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.CUMULATIVE_DECREASING,
                        message=(
                            f"Cumulative target drops from {previous:.2f} "
                            f"to {cumulative:.2f}"
                        ),
                        slot_label=slot_target.label,
                    )
                )
            if cumulative > run.target + TOLERANCE:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.CUMULATIVE_EXCEEDS_TARGET,
                        message=(
                            f"Cumulative target {cumulative:.2f} exceeds "
                            f"run target {run.target:.2f}"
                        ),
                        slot_label=slot_target.label,
                    )
                )
            previous = cumulative

        if run.target > 0 and total_hours(run.slots) > 0:
            last = run.slot_targets[-1].cumulative_target
            if abs(last - run.target) >= TOLERANCE:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.CUMULATIVE_NOT_CLOSED,
                        message=(
                            f"Final cumulative target {last:.2f} does not reach "
                            f"run target {run.target:.2f}"
                        ),
                        slot_label=run.slot_targets[-1].label,
                    )
                )

    def _validate_operations(
        self, run: ProductionRun, result: ValidationResult
    ) -> None:
        """Check operations are unique per operator and have time studies."""
        for (operator_no, name), count in Counter(
            op.key for op in run.operations
        ).items():
            if count > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_OPERATION,
                        message=f"Operation '{name}' appears {count} times",
                        operator_no=operator_no,
                    )
                )

        operators = len(run.operator_numbers)
        if run.params.operator_count > 0 and operators > run.params.operator_count:
            result.add_warning(
                f"{operators} operators have operations but the run plans "
                f"{run.params.operator_count:g}"
            )

        for op in run.operations:
            if not op.has_samples:
                result.add_warning(
                    f"Operator {op.operator_no}: '{op.operation_name}' has no "
                    f"time-study samples, capacity is 0"
                )

    def _validate_entries(self, run: ProductionRun, result: ValidationResult) -> None:
        """Check hourly entries reference known slots and operations."""
        labels = set(run.slot_labels)
        operations = {op.key for op in run.operations}

        for entry in run.entries.values():
            if entry.slot_label not in labels:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_SLOT,
                        message=f"Entry for '{entry.operation_name}' has unknown slot",
                        operator_no=entry.operator_no,
                        slot_label=entry.slot_label,
                    )
                )
            if entry.operation_key not in operations:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_OPERATION,
                        message=f"Entry references unknown operation '{entry.operation_name}'",
                        operator_no=entry.operator_no,
                        slot_label=entry.slot_label,
                    )
                )
            if entry.quantity < 0 or entry.stitched_qty < 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NEGATIVE_QUANTITY,
                        message=(
                            f"Negative quantity for '{entry.operation_name}' "
                            f"(sewed {entry.quantity}, stitched {entry.stitched_qty})"
                        ),
                        operator_no=entry.operator_no,
                        slot_label=entry.slot_label,
                    )
                )
