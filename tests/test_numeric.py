"""Tests for numeric coercion."""

from decimal import Decimal

import pytest

from sewline.domain.numeric import round2, safe_number


class TestSafeNumber:
    """Tests for safe_number."""

    def test_numbers_pass_through(self):
        """Finite ints and floats are returned as floats."""
        assert safe_number(5) == 5.0
        assert safe_number(18.5) == 18.5
        assert safe_number(-3) == -3.0

    def test_numeric_strings(self):
        """Numeric strings, including padded ones, are parsed."""
        assert safe_number("18.5") == 18.5
        assert safe_number("  25 ") == 25.0

    def test_decimal(self):
        """Decimals from database drivers are accepted."""
        assert safe_number(Decimal("8.85")) == pytest.approx(8.85)

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "abc", float("nan"), float("inf"), -float("inf"), [], {}, True],
    )
    def test_unusable_values_fall_back_to_zero(self, value):
        """Missing, non-numeric and non-finite values yield 0."""
        assert safe_number(value) == 0.0

    def test_custom_fallback(self):
        """The fallback replaces an unusable value."""
        assert safe_number("n/a", fallback=0.7) == 0.7
        assert safe_number(None, fallback=0.7) == 0.7

    def test_zero_is_not_replaced_by_fallback(self):
        """A real zero is a valid number."""
        assert safe_number(0, fallback=0.7) == 0.0


class TestRound2:
    """Tests for round2."""

    def test_rounds_to_two_decimals(self):
        """Values are rounded to 2 decimals."""
        assert round2(56.756756) == 56.76
        assert round2(42.567567) == 42.57

    def test_coerces_first(self):
        """Strings and missing values are coerced before rounding."""
        assert round2("1.234") == 1.23
        assert round2(None) == 0.0
