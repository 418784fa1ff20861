"""Tests for target calculation."""

import pytest

from sewline.domain.models import RunParameters
from sewline.planning.targets import (
    calculate_target,
    compute_target,
    compute_target_per_hour,
)


class TestComputeTarget:
    """Tests for compute_target."""

    def test_reference_line(self):
        """25 operators, 8.85h, SAM 18.5 at 70% gives about 502.30 pieces."""
        assert compute_target(25, 8.85, 18.5, 0.7) == pytest.approx(502.2973, abs=1e-3)
        assert round(compute_target(25, 8.85, 18.5, 0.7), 2) == 502.3

    @pytest.mark.parametrize(
        "operators,hours,sam,eff",
        [
            (0, 8.85, 18.5, 0.7),
            (25, 0, 18.5, 0.7),
            (25, 8.85, 0, 0.7),
            (25, 8.85, 18.5, 0),
            (-1, 8.85, 18.5, 0.7),
            (25, 8.85, -18.5, 0.7),
            (None, 8.85, 18.5, 0.7),
            ("", "8.85", "18.5", "0.7"),
        ],
    )
    def test_non_positive_driver_gives_zero(self, operators, hours, sam, eff):
        """Any missing or non-positive driver yields a zero target."""
        assert compute_target(operators, hours, sam, eff) == 0.0

    def test_string_inputs(self):
        """Numeric strings from entry forms are accepted."""
        assert compute_target("25", "8.85", "18.5", "0.7") == pytest.approx(
            compute_target(25, 8.85, 18.5, 0.7)
        )

    def test_monotonic_in_operators_and_hours(self):
        """More operators or hours never lower the target."""
        base = compute_target(25, 8.85, 18.5, 0.7)
        assert compute_target(26, 8.85, 18.5, 0.7) > base
        assert compute_target(25, 9.5, 18.5, 0.7) > base

    def test_monotonic_in_efficiency_and_sam(self):
        """Higher efficiency raises the target; longer SAM lowers it."""
        base = compute_target(25, 8.85, 18.5, 0.7)
        assert compute_target(25, 8.85, 18.5, 0.8) > base
        assert compute_target(25, 8.85, 20.0, 0.7) < base


class TestComputeTargetPerHour:
    """Tests for compute_target_per_hour."""

    def test_per_hour(self):
        """Target is spread evenly over working hours."""
        assert compute_target_per_hour(885, 8.85) == pytest.approx(100.0)

    def test_zero_hours(self):
        """No working hours gives zero per hour."""
        assert compute_target_per_hour(500, 0) == 0.0
        assert compute_target_per_hour(500, None) == 0.0


class TestCalculateTarget:
    """Tests for calculate_target."""

    def test_from_parameters(self):
        """Target and per-hour target come from run parameters."""
        params = RunParameters(
            line_no="7",
            operator_count=25,
            working_hours=8.85,
            sam_minutes=18.5,
            efficiency=0.7,
        )
        target = calculate_target(params)

        assert target.pieces_target == pytest.approx(502.2973, abs=1e-3)
        assert target.pieces_per_hour == pytest.approx(502.2973 / 8.85, abs=1e-3)
        assert target.to_dict()["piecesTarget"] == target.pieces_target

    def test_incomplete_parameters(self):
        """A run without SAM has no target."""
        target = calculate_target(RunParameters(operator_count=25, working_hours=8.85))

        assert target.pieces_target == 0.0
        assert target.pieces_per_hour == 0.0
