"""Domain models and business rules for production tracking."""

from sewline.domain.models import (
    Alert,
    AlertType,
    HourlyEntry,
    LineStatus,
    OperatorOperation,
    ProductionRun,
    RunParameters,
    Severity,
    ShiftSlot,
    SlotTarget,
)
from sewline.domain.numeric import round2, safe_number
from sewline.domain.policies import (
    AlertPolicy,
    DefaultAlertPolicy,
    DefaultStatusPolicy,
    SlotBuildConfig,
    StatusPolicy,
    VariancePolicy,
)

__all__ = [
    # Models
    "Alert",
    "AlertType",
    "HourlyEntry",
    "LineStatus",
    "OperatorOperation",
    "ProductionRun",
    "RunParameters",
    "Severity",
    "ShiftSlot",
    "SlotTarget",
    # Numeric guard
    "round2",
    "safe_number",
    # Policies
    "AlertPolicy",
    "DefaultAlertPolicy",
    "DefaultStatusPolicy",
    "SlotBuildConfig",
    "StatusPolicy",
    "VariancePolicy",
]
