"""Tests for slot target allocation."""

import pytest

from sewline.domain.models import ShiftSlot
from sewline.planning.allocation import allocate, cumulative
from sewline.planning.slots import build_slots
from sewline.planning.targets import compute_target


class TestAllocate:
    """Tests for allocate."""

    @pytest.fixture
    def slots(self):
        """Standard 8.85h day."""
        return build_slots(8.85)

    @pytest.fixture
    def target(self):
        """Reference target of about 502.30 pieces."""
        return compute_target(25, 8.85, 18.5, 0.7)

    def test_slot_targets_proportional_to_hours(self, slots, target):
        """Each slot gets per-hour target times its hours, rounded."""
        allocated = allocate(target, slots)

        assert [a.label for a in allocated] == [s.label for s in slots]
        assert allocated[0].slot_target == 42.57
        assert allocated[1].slot_target == 56.76
        assert allocated[4].slot_target == 28.38
        assert allocated[-1].slot_target == 34.05

    def test_final_cumulative_equals_target(self, slots, target):
        """The curve closes at the run target."""
        allocated = allocate(target, slots)

        assert allocated[-1].cumulative_target == pytest.approx(target)

    def test_cumulative_non_decreasing_and_bounded(self, slots, target):
        """The cumulative curve never drops and never passes the target."""
        allocated = allocate(target, slots)
        curve = [a.cumulative_target for a in allocated]

        assert curve == sorted(curve)
        assert all(c <= target + 1e-9 for c in curve)

    @pytest.mark.parametrize("working_hours", [8.0, 7.5, 10.0, 3.3])
    def test_curve_properties_for_other_days(self, working_hours):
        """Closing and monotonicity hold for scaled days too."""
        slots = build_slots(working_hours)
        target = compute_target(30, working_hours, 12.0, 0.65)
        curve = [a.cumulative_target for a in allocate(target, slots)]

        assert curve == sorted(curve)
        assert curve[-1] == pytest.approx(target)

    def test_idempotent(self, slots, target):
        """Allocating twice gives identical results."""
        assert allocate(target, slots) == allocate(target, slots)

    def test_zero_target(self, slots):
        """A zero target gives zero slot targets."""
        allocated = allocate(0, slots)

        assert len(allocated) == len(slots)
        assert all(a.slot_target == 0 and a.cumulative_target == 0 for a in allocated)

    def test_negative_target_treated_as_zero(self, slots):
        """Negative targets never produce negative curves."""
        assert all(a.cumulative_target == 0 for a in allocate(-50, slots))

    def test_no_slots(self):
        """No slots gives no slot targets."""
        assert allocate(500, []) == []

    def test_zero_hour_slots(self):
        """Slots without hours share nothing."""
        slots = [ShiftSlot("9", 0.0, 1), ShiftSlot("10", 0.0, 2)]

        assert all(a.slot_target == 0 for a in allocate(100, slots))


class TestCumulative:
    """Tests for cumulative."""

    def test_running_totals(self):
        """Running totals coerce missing values to 0."""
        assert cumulative([10, None, "5", 2.5]) == [10.0, 10.0, 15.0, 17.5]

    def test_empty(self):
        """No values, no totals."""
        assert cumulative([]) == []
