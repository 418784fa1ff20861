"""Tests for alert and status policies."""

import pytest

from sewline.domain.models import LineStatus, Severity
from sewline.domain.policies import (
    DefaultAlertPolicy,
    DefaultStatusPolicy,
    SlotBuildConfig,
    VariancePolicy,
)


class TestDefaultAlertPolicy:
    """Tests for DefaultAlertPolicy."""

    @pytest.fixture
    def policy(self):
        """Create a default alert policy."""
        return DefaultAlertPolicy()

    def test_critical_variance(self, policy):
        """More than half the plan missing is critical."""
        assert policy.is_critical_variance(-60, 100)
        assert not policy.is_critical_variance(-50, 100)
        assert not policy.is_critical_variance(20, 100)

    def test_critical_with_no_plan(self, policy):
        """Any shortfall is critical when nothing was planned."""
        assert policy.is_critical_variance(-1, 0)

    def test_variance_severity_bands(self, policy):
        """Shortfalls above 30% are HIGH, above 10% MEDIUM."""
        assert policy.variance_severity(-35, 100) is Severity.HIGH
        assert policy.variance_severity(-20, 100) is Severity.MEDIUM
        assert policy.variance_severity(-10, 100) is None
        assert policy.variance_severity(-5, 100) is None

    def test_surplus_never_alerts(self, policy):
        """Sewing more than planned raises no variance alert."""
        assert policy.variance_severity(50, 100) is None
        assert policy.variance_severity(0, 100) is None

    def test_efficiency_bands(self, policy):
        """Below 0.6 is HIGH, from 0.6 to below 0.8 MEDIUM."""
        assert policy.efficiency_severity(0.55) is Severity.HIGH
        assert policy.efficiency_severity(0.6) is Severity.MEDIUM
        assert policy.efficiency_severity(0.79) is Severity.MEDIUM
        assert policy.efficiency_severity(0.8) is None
        assert policy.efficiency_severity(1.2) is None

    def test_zero_efficiency_not_alerted(self, policy):
        """Zero efficiency is covered by the no-production rule."""
        assert policy.efficiency_severity(0) is None

    def test_default_variance_policy(self, policy):
        """Critical variance replaces the plain variance alert by default."""
        assert policy.variance_policy is VariancePolicy.SUPPRESS

    def test_custom_thresholds(self):
        """Thresholds can be tightened."""
        policy = DefaultAlertPolicy(medium_variance_ratio=0.05)

        assert policy.variance_severity(-8, 100) is Severity.MEDIUM


class TestDefaultStatusPolicy:
    """Tests for DefaultStatusPolicy."""

    @pytest.fixture
    def policy(self):
        """Create a default status policy."""
        return DefaultStatusPolicy()

    @pytest.mark.parametrize(
        "variance_pct,expected",
        [
            (-20, LineStatus.CRITICAL),
            (-15, LineStatus.BEHIND),
            (-10, LineStatus.BEHIND),
            (-5, LineStatus.ON_TRACK),
            (0, LineStatus.ON_TRACK),
            (5, LineStatus.ON_TRACK),
            (10, LineStatus.AHEAD),
            (15, LineStatus.AHEAD),
            (16, LineStatus.EXCEEDING),
        ],
    )
    def test_bands(self, policy, variance_pct, expected):
        """Variance percentages map onto the dashboard bands."""
        assert policy.classify(variance_pct, 100) is expected

    def test_no_target(self, policy):
        """A zero target has no status band."""
        assert policy.classify(0, 0) is LineStatus.NO_TARGET


class TestSlotBuildConfig:
    """Tests for SlotBuildConfig."""

    def test_trailing_label(self):
        """The trailing label combines end hour and minutes."""
        assert SlotBuildConfig().trailing_label == "17:36"
        assert SlotBuildConfig(end_hour=18, last_slot_label_minutes=5).trailing_label == "18:05"
