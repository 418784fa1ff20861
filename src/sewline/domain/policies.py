"""Policy definitions for planning and alerting rules.

This module contains configurable policies that define business rules for
slot patterns, alert thresholds and dashboard status bands. Policies are
kept separate from the calculation engine to allow independent testing and
easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sewline.domain.models import LineStatus, Severity


@dataclass(frozen=True)
class SlotBuildConfig:
    """Fixed slot pattern for a working day.

    The default pattern produces slots labeled 9, 10, ... 17 and a short
    trailing slot 17:36. The first slot is 45 minutes, the lunch slot
    30 minutes and the trailing slot 36 minutes before scaling.

    Attributes:
        start_hour: Hour of the first slot.
        end_hour: Hour of the last full-hour label.
        lunch_hour: Hour whose slot is shortened by lunch.
        first_slot_hours: Base weight of the first slot.
        lunch_slot_hours: Base weight of the lunch slot.
        last_slot_hours: Base weight of the trailing slot.
        last_slot_label_minutes: Minutes part of the trailing slot label.
    """

    start_hour: int = 9
    end_hour: int = 17
    lunch_hour: int = 13
    first_slot_hours: float = 0.75
    lunch_slot_hours: float = 0.5
    last_slot_hours: float = 0.6
    last_slot_label_minutes: int = 36

    @property
    def trailing_label(self) -> str:
        return f"{self.end_hour}:{self.last_slot_label_minutes:02d}"


class VariancePolicy(Enum):
    """How VARIANCE alerts interact with CRITICAL_VARIANCE on the same row."""

    SUPPRESS = "suppress"  # critical variance replaces the plain variance alert
    EMIT_BOTH = "emit_both"


class AlertPolicy(ABC):
    """Abstract base class for alert classification rules."""

    @abstractmethod
    def is_critical_variance(self, variance: float, planned_qty: float) -> bool:
        """Check if a shortfall is severe enough for a critical alert."""
        pass

    @abstractmethod
    def variance_severity(
        self, variance: float, planned_qty: float
    ) -> Optional[Severity]:
        """Get severity of a shortfall, or None when no alert is due.

        Args:
            variance: Sewed minus planned quantity.
            planned_qty: Planned quantity for the row.
        """
        pass

    @abstractmethod
    def efficiency_severity(self, efficiency: float) -> Optional[Severity]:
        """Get severity of an efficiency ratio, or None when no alert is due."""
        pass


@dataclass
class DefaultAlertPolicy(AlertPolicy):
    """Default alert thresholds.

    Variance (only shortfalls alert):
    - more than 50% below plan: CRITICAL_VARIANCE
    - more than 30% below plan: HIGH
    - more than 10% below plan: MEDIUM

    Efficiency (sewed / capacity per hour):
    - above 0 and below 0.6: HIGH
    - from 0.6 up to 0.8: MEDIUM
    """

    critical_variance_ratio: float = 0.5
    high_variance_ratio: float = 0.3
    medium_variance_ratio: float = 0.1

    high_efficiency_below: float = 0.6
    medium_efficiency_below: float = 0.8

    variance_policy: VariancePolicy = VariancePolicy.SUPPRESS

    def is_critical_variance(self, variance: float, planned_qty: float) -> bool:
        return variance < 0 and abs(variance) > self.critical_variance_ratio * planned_qty

    def variance_severity(
        self, variance: float, planned_qty: float
    ) -> Optional[Severity]:
        if variance >= 0:
            return None
        shortfall = abs(variance)
        if shortfall > self.high_variance_ratio * planned_qty:
            return Severity.HIGH
        elif shortfall > self.medium_variance_ratio * planned_qty:
            return Severity.MEDIUM
        return None

    def efficiency_severity(self, efficiency: float) -> Optional[Severity]:
        if 0 < efficiency < self.high_efficiency_below:
            return Severity.HIGH
        elif self.high_efficiency_below <= efficiency < self.medium_efficiency_below:
            return Severity.MEDIUM
        return None


class StatusPolicy(ABC):
    """Abstract base class for dashboard status classification."""

    @abstractmethod
    def classify(self, variance_pct: float, target: float) -> LineStatus:
        """Map a variance percentage to a dashboard status."""
        pass


@dataclass
class DefaultStatusPolicy(StatusPolicy):
    """Default status bands around the target.

    - target of 0: No Target
    - below -15%: Critical
    - -15% to below -5%: Behind
    - -5% to +5%: On Track
    - above +5% to +15%: Ahead
    - above +15%: Exceeding
    """

    critical_below: float = -15.0
    behind_below: float = -5.0
    on_track_upto: float = 5.0
    ahead_upto: float = 15.0

    def classify(self, variance_pct: float, target: float) -> LineStatus:
        if target == 0:
            return LineStatus.NO_TARGET
        if variance_pct < self.critical_below:
            return LineStatus.CRITICAL
        elif variance_pct < self.behind_below:
            return LineStatus.BEHIND
        elif variance_pct <= self.on_track_upto:
            return LineStatus.ON_TRACK
        elif variance_pct <= self.ahead_upto:
            return LineStatus.AHEAD
        return LineStatus.EXCEEDING
