"""Tests for capacity calculation."""

import pytest

from sewline.domain.models import OperatorOperation
from sewline.planning.capacity import (
    assign_capacities,
    capacity_for_operator_multi_operation,
    capacity_from_samples,
)


class TestCapacityFromSamples:
    """Tests for single-operation capacity."""

    def test_five_equal_samples(self):
        """Five 60-second samples give 60 pieces per hour."""
        assert capacity_from_samples(60, 60, 60, 60, 60) == pytest.approx(60.0)

    def test_missing_samples_ignored(self):
        """Only present, positive samples are averaged."""
        assert capacity_from_samples(None, 30, "", 0, 90) == pytest.approx(60.0)

    def test_no_samples(self):
        """No usable sample gives zero capacity."""
        assert capacity_from_samples() == 0.0
        assert capacity_from_samples(None, None, "", 0, -5) == 0.0

    def test_extra_samples_ignored(self):
        """Only the five time-study columns count."""
        assert capacity_from_samples(60, 60, 60, 60, 60, 1) == pytest.approx(60.0)


class TestCapacityMultiOperation:
    """Tests for multi-operation capacity."""

    def test_two_operations_of_sixty_seconds(self):
        """Two full operations of 60s samples give 30 pieces per hour."""
        ops = [{"t1": 60, "t2": 60, "t3": 60, "t4": 60, "t5": 60}] * 2

        assert capacity_for_operator_multi_operation(ops) == pytest.approx(30.0)

    def test_divides_by_sample_columns(self):
        """Missing samples count as 0 but the divisor stays five."""
        ops = [{"t1": 60}, {"t1": 60}]

        # 120s / 5 = 24s per piece
        assert capacity_for_operator_multi_operation(ops) == pytest.approx(150.0)

    def test_operator_operation_objects(self):
        """OperatorOperation records are accepted."""
        ops = [
            OperatorOperation(1, "Collar", samples=(60,) * 5),
            OperatorOperation(1, "Cuff", samples=(60,) * 5),
        ]

        assert capacity_for_operator_multi_operation(ops) == pytest.approx(30.0)

    def test_no_samples(self):
        """No samples at all gives zero."""
        assert capacity_for_operator_multi_operation([{}, {}]) == 0.0
        assert capacity_for_operator_multi_operation([]) == 0.0


class TestAssignCapacities:
    """Tests for assign_capacities."""

    def test_single_and_shared(self):
        """Operators with several operations share the multi-operation capacity."""
        ops = [
            OperatorOperation(1, "Collar", samples=(60,) * 5),
            OperatorOperation(2, "Cuff", samples=(60,) * 5),
            OperatorOperation(2, "Placket", samples=(60,) * 5),
        ]
        result = assign_capacities(ops)

        assert [op.key for op in result] == [op.key for op in ops]
        assert result[0].capacity_per_hour == pytest.approx(60.0)
        assert result[1].capacity_per_hour == pytest.approx(30.0)
        assert result[2].capacity_per_hour == pytest.approx(30.0)

    def test_does_not_mutate_input(self):
        """Input operations keep their stored capacity."""
        ops = [OperatorOperation(1, "Collar", samples=(60,) * 5, capacity_per_hour=1.0)]
        assign_capacities(ops)

        assert ops[0].capacity_per_hour == 1.0
