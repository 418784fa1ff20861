"""Tests for production run validation."""

from dataclasses import replace

import pytest

from sewline.domain.models import (
    HourlyEntry,
    OperatorOperation,
    RunParameters,
    ShiftSlot,
    SlotTarget,
)
from sewline.planning.planner import LinePlanner
from sewline.validation.validator import PlanValidator, ValidationErrorType


class TestPlanValidator:
    """Tests for PlanValidator."""

    @pytest.fixture
    def validator(self):
        """Create a validator."""
        return PlanValidator()

    @pytest.fixture
    def params(self):
        """Reference line parameters."""
        return RunParameters(
            line_no="7",
            operator_count=2,
            working_hours=8.85,
            sam_minutes=18.5,
            efficiency=0.7,
        )

    @pytest.fixture
    def run(self, params):
        """A consistent run with two operations and entries."""
        return LinePlanner().build_run(
            params,
            [
                OperatorOperation(1, "Collar", samples=(60,) * 5),
                OperatorOperation(2, "Cuff", samples=(55, 58, 60)),
            ],
            [
                HourlyEntry(1, "Collar", "9", 40, 45),
                HourlyEntry(2, "Cuff", "9", 38, 45),
                HourlyEntry(2, "Cuff", "10", 50, 60),
            ],
        )

    def test_valid_run(self, validator, run):
        """A planner-built run passes."""
        result = validator.validate(run)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_slot_hours_mismatch(self, validator, run):
        """Slot hours must add up to the working hours."""
        run.slots[1] = ShiftSlot("10", 2.0, 2)
        result = validator.validate(run)

        assert not result.is_valid
        assert result.has_error(ValidationErrorType.SLOT_HOURS_MISMATCH)

    def test_negative_slot_hours(self, validator, run):
        """Negative slot hours are rejected."""
        run.slots[0] = ShiftSlot("9", -0.75, 1)

        assert validator.validate(run).has_error(ValidationErrorType.NEGATIVE_SLOT_HOURS)

    def test_missing_slots(self, validator, run):
        """A run with working hours needs slots."""
        run.slots = []
        run.slot_targets = []

        assert validator.validate(run).has_error(ValidationErrorType.MISSING_SLOTS)

    def test_duplicate_slot_label(self, validator, run):
        """Slot labels are unique within a run."""
        run.slots[2] = ShiftSlot("10", run.slots[2].hours, 3)

        assert validator.validate(run).has_error(ValidationErrorType.DUPLICATE_SLOT_LABEL)

    def test_decreasing_curve(self, validator, run):
        """A cumulative curve that drops is an error."""
        noon = run.slot_targets[3]
        run.slot_targets[3] = replace(noon, cumulative_target=1.0)
        result = validator.validate(run)

        errors = [e for e in result.errors
                  if e.error_type == ValidationErrorType.CUMULATIVE_DECREASING]
        assert len(errors) == 1
        assert errors[0].slot_label == "12"

    def test_curve_above_target(self, validator, run):
        """No cumulative value may exceed the run target."""
        last = run.slot_targets[-1]
        run.slot_targets[-1] = replace(last, cumulative_target=run.target + 5)

        assert validator.validate(run).has_error(
            ValidationErrorType.CUMULATIVE_EXCEEDS_TARGET
        )

    def test_curve_not_closed(self, validator, run):
        """The last cumulative value must reach the run target."""
        last = run.slot_targets[-1]
        run.slot_targets[-1] = replace(last, cumulative_target=run.target - 3)

        assert validator.validate(run).has_error(ValidationErrorType.CUMULATIVE_NOT_CLOSED)

    def test_misaligned_slot_targets(self, validator, run):
        """Slot targets line up with slots."""
        run.slot_targets = run.slot_targets[:-1] + [SlotTarget("18", 0, run.target)]

        assert validator.validate(run).has_error(
            ValidationErrorType.SLOT_TARGETS_MISALIGNED
        )

    def test_duplicate_operation(self, validator, run):
        """An operator cannot list the same operation twice."""
        run.operations.append(OperatorOperation(1, "Collar"))

        assert validator.validate(run).has_error(ValidationErrorType.DUPLICATE_OPERATION)

    def test_unknown_slot_entry(self, validator, run):
        """Entries must use one of the run's slot labels."""
        run.record_entry(HourlyEntry(1, "Collar", "22", 5, 5))
        result = validator.validate(run)

        assert result.has_error(ValidationErrorType.UNKNOWN_SLOT)
        assert "slot 22" in str(result.errors[0])

    def test_orphan_entry(self, validator, run):
        """Entries must belong to one of the run's operations."""
        run.record_entry(HourlyEntry(3, "Hem", "9", 5, 5))

        assert validator.validate(run).has_error(ValidationErrorType.UNKNOWN_OPERATION)

    def test_removed_operation_leaves_no_orphans(self, validator, run):
        """Removing an operation removes its entries too."""
        run.remove_operation(2, "Cuff")

        assert validator.validate(run).is_valid

    def test_negative_quantity(self, validator, run):
        """Quantities cannot be negative."""
        run.record_entry(HourlyEntry(1, "Collar", "10", -4, 10))

        assert validator.validate(run).has_error(ValidationErrorType.NEGATIVE_QUANTITY)

    def test_warnings_do_not_invalidate(self, validator, params):
        """Missing samples and surplus operators only warn."""
        run = LinePlanner().build_run(
            params,
            [
                OperatorOperation(1, "Collar"),
                OperatorOperation(2, "Cuff", samples=(60,)),
                OperatorOperation(3, "Hem", samples=(60,)),
            ],
        )
        result = validator.validate(run)

        assert result.is_valid
        assert len(result.warnings) == 2
        assert any("no time-study samples" in w for w in result.warnings)
        assert any("3 operators" in w for w in result.warnings)

    def test_zero_target_warning(self, validator):
        """A run without drivers is valid but warned about."""
        run = LinePlanner().build_run(RunParameters(line_no="1"))
        result = validator.validate(run)

        assert result.is_valid
        assert any("no target" in w for w in result.warnings)

    def test_error_string(self, validator, run):
        """Errors render their type, operator and slot."""
        run.record_entry(HourlyEntry(1, "Collar", "10", -4, 10))
        error = validator.validate(run).errors[0]

        assert str(error).startswith("[negative_quantity] Operator 1:")
        assert str(error).endswith("(slot 10)")
