"""Domain models for sewing-line production tracking.

This module contains the core records used throughout the system: run
parameters, shift slots and their targets, operator operations with their
time-study samples, hourly entries and derived alerts.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from sewline.domain.numeric import safe_number

# Number of time-study columns recorded per operation.
SAMPLE_COUNT = 5

DEFAULT_EFFICIENCY = 0.7
UNNAMED_OPERATION = "Unnamed Operation"


class AlertType(Enum):
    """Kinds of discrepancy raised by the alert engine."""

    VARIANCE = "VARIANCE"
    CRITICAL_VARIANCE = "CRITICAL_VARIANCE"
    EFFICIENCY = "EFFICIENCY"
    NO_PRODUCTION = "NO_PRODUCTION"


class Severity(Enum):
    """Alert severity, ordered HIGH before MEDIUM before LOW."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort key: lower ranks are more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}


class LineStatus(Enum):
    """Dashboard status of a line, derived from its variance percentage."""

    NO_TARGET = "No Target"
    CRITICAL = "Critical"
    BEHIND = "Behind"
    ON_TRACK = "On Track"
    AHEAD = "Ahead"
    EXCEEDING = "Exceeding"


def _pick(record: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among ``keys``."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _optional_sample(value: Any) -> Optional[float]:
    number = safe_number(value, fallback=float("nan"))
    if number != number:  # NaN marks a missing sample
        return None
    return number


@dataclass(frozen=True)
class RunParameters:
    """Parameters of a daily production run on one line.

    Attributes:
        line_no: Line identifier (e.g. "7").
        run_date: Production date.
        style: Garment style being sewn.
        operator_count: Number of operators on the line.
        working_hours: Planned working hours for the day.
        sam_minutes: Standard allowed minutes per piece.
        efficiency: Efficiency assumption in (0, 1].
    """

    line_no: str = ""
    run_date: Optional[date] = None
    style: str = ""
    operator_count: float = 0
    working_hours: float = 0.0
    sam_minutes: float = 0.0
    efficiency: float = DEFAULT_EFFICIENCY

    @property
    def is_ready(self) -> bool:
        """True when every target driver is strictly positive."""
        return (
            self.operator_count > 0
            and self.working_hours > 0
            and self.sam_minutes > 0
            and self.efficiency > 0
        )

    @classmethod
    def from_record(
        cls,
        record: dict,
        default_efficiency: float = DEFAULT_EFFICIENCY,
    ) -> "RunParameters":
        """Build parameters from a loosely-typed record.

        Accepts both the camelCase keys used by the entry forms and the
        snake_case column names of stored runs. A missing or unparseable
        efficiency falls back to ``default_efficiency``.
        """
        efficiency = safe_number(
            _pick(record, "efficiency"), fallback=default_efficiency
        )
        if efficiency == 0:
            efficiency = default_efficiency

        return cls(
            line_no=str(_pick(record, "line", "lineNo", "line_no", default="")),
            run_date=_parse_date(_pick(record, "date", "runDate", "run_date")),
            style=str(_pick(record, "style", default="")),
            operator_count=safe_number(
                _pick(record, "operators", "operatorCount", "operators_count")
            ),
            working_hours=safe_number(
                _pick(record, "workingHours", "working_hours")
            ),
            sam_minutes=safe_number(_pick(record, "sam", "samMinutes", "sam_minutes")),
            efficiency=efficiency,
        )

    def to_dict(self) -> dict:
        return {
            "line": self.line_no,
            "date": self.run_date.isoformat() if self.run_date else None,
            "style": self.style,
            "operatorCount": self.operator_count,
            "workingHours": self.working_hours,
            "samMinutes": self.sam_minutes,
            "efficiency": self.efficiency,
        }


@dataclass(frozen=True)
class ShiftSlot:
    """A labeled sub-interval of the working day.

    Attributes:
        label: Stable label such as "9", "13" or "17:36".
        hours: Planned hours in the slot.
        order: 1-based position in the day.
    """

    label: str
    hours: float
    order: int = 0

    def to_dict(self) -> dict:
        return {"label": self.label, "hours": self.hours}


@dataclass(frozen=True)
class SlotTarget:
    """Piece target for one slot and the running total up to it."""

    label: str
    slot_target: float
    cumulative_target: float

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "slotTarget": self.slot_target,
            "cumulativeTarget": self.cumulative_target,
        }


@dataclass
class OperatorOperation:
    """One operation performed by an operator during a run.

    Attributes:
        operator_no: Operator number on the line.
        operation_name: Name of the sewing operation.
        operator_name: Optional operator display name.
        samples: Up to five time-study samples in seconds; missing ones are None.
        capacity_per_hour: Derived pieces-per-hour capacity.
    """

    operator_no: int
    operation_name: str = UNNAMED_OPERATION
    operator_name: Optional[str] = None
    samples: tuple = ()
    capacity_per_hour: float = 0.0

    def __post_init__(self):
        samples = [_optional_sample(s) for s in list(self.samples)[:SAMPLE_COUNT]]
        samples += [None] * (SAMPLE_COUNT - len(samples))
        self.samples = tuple(samples)
        if not self.operation_name:
            self.operation_name = UNNAMED_OPERATION

    @property
    def key(self) -> tuple[int, str]:
        return (self.operator_no, self.operation_name)

    @property
    def display_name(self) -> str:
        return self.operator_name or f"Operator {self.operator_no}"

    @property
    def has_samples(self) -> bool:
        return any(s is not None and s > 0 for s in self.samples)

    def with_capacity(self, capacity_per_hour: float) -> "OperatorOperation":
        """Return a copy carrying a recomputed capacity."""
        return replace(self, capacity_per_hour=capacity_per_hour)

    @classmethod
    def from_record(cls, record: dict) -> "OperatorOperation":
        samples = tuple(
            _pick(record, f"t{i}", f"t{i}_sec") for i in range(1, SAMPLE_COUNT + 1)
        )
        operator_name = _pick(record, "operatorName", "operator_name")
        return cls(
            operator_no=int(safe_number(_pick(record, "operatorNo", "operator_no"))),
            operation_name=str(
                _pick(
                    record,
                    "operation",
                    "operationName",
                    "operation_name",
                    default=UNNAMED_OPERATION,
                )
            ),
            operator_name=None if operator_name is None else str(operator_name),
            samples=samples,
            capacity_per_hour=safe_number(
                _pick(record, "capacityPerHour", "capacity_per_hour")
            ),
        )


@dataclass
class HourlyEntry:
    """Quantities entered by a line leader for one operation in one slot.

    Attributes:
        operator_no: Operator number.
        operation_name: Operation the quantities belong to.
        slot_label: Label of the slot the quantities were produced in.
        quantity: Actual sewed quantity.
        stitched_qty: Stitched (planned) quantity recorded for the slot.
    """

    operator_no: int
    operation_name: str
    slot_label: str
    quantity: float = 0.0
    stitched_qty: float = 0.0

    @property
    def key(self) -> tuple[int, str, str]:
        return (self.operator_no, self.operation_name, self.slot_label)

    @property
    def operation_key(self) -> tuple[int, str]:
        return (self.operator_no, self.operation_name)

    @classmethod
    def from_record(cls, record: dict) -> "HourlyEntry":
        return cls(
            operator_no=int(safe_number(_pick(record, "operatorNo", "operator_no"))),
            operation_name=str(
                _pick(
                    record,
                    "operationName",
                    "operation_name",
                    "operation",
                    default=UNNAMED_OPERATION,
                )
            ),
            slot_label=str(_pick(record, "slotLabel", "slot_label", default="")),
            quantity=safe_number(_pick(record, "quantity", "sewedQty", "sewed_qty")),
            stitched_qty=safe_number(_pick(record, "stitchedQty", "stitched_qty")),
        )


@dataclass(frozen=True)
class Alert:
    """A discrepancy between planned and actual output for one operation.

    Alerts are views over current data and are never stored.
    """

    type: AlertType
    severity: Severity
    operator_no: int
    operation_name: str
    message: str
    operator_name: Optional[str] = None
    style: Optional[str] = None
    planned_qty: Optional[float] = None
    sewed_qty: Optional[float] = None
    variance: Optional[float] = None
    variance_pct: Optional[float] = None
    efficiency: Optional[float] = None
    capacity_per_hour: Optional[float] = None
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "severity": self.severity.value,
            "operatorNo": self.operator_no,
            "operatorName": self.operator_name,
            "operationName": self.operation_name,
            "style": self.style,
            "plannedQty": self.planned_qty,
            "sewedQty": self.sewed_qty,
            "variance": self.variance,
            "variancePercentage": self.variance_pct,
            "efficiency": self.efficiency,
            "capacityPerHour": self.capacity_per_hour,
            "message": self.message,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class ProductionRun:
    """A production run with everything it owns.

    The run owns its slots and slot targets; each operation owns the
    hourly entries recorded against it. Entries are keyed by
    (operator, operation, slot) so that re-entry overwrites.

    Attributes:
        params: Run parameters.
        target: Total piece target.
        target_per_hour: Piece target per working hour.
        slots: Ordered shift slots.
        slot_targets: Slot targets aligned positionally with ``slots``.
        operations: Operator operations in entry order.
        entries: Hourly entries keyed by (operator, operation, slot).
    """

    params: RunParameters
    target: float = 0.0
    target_per_hour: float = 0.0
    slots: list[ShiftSlot] = field(default_factory=list)
    slot_targets: list[SlotTarget] = field(default_factory=list)
    operations: list[OperatorOperation] = field(default_factory=list)
    entries: dict[tuple[int, str, str], HourlyEntry] = field(default_factory=dict)

    @property
    def slot_labels(self) -> list[str]:
        return [s.label for s in self.slots]

    @property
    def operator_numbers(self) -> list[int]:
        """Distinct operator numbers, ascending."""
        return sorted({op.operator_no for op in self.operations})

    def get_operation(
        self, operator_no: int, operation_name: str
    ) -> Optional[OperatorOperation]:
        for op in self.operations:
            if op.key == (operator_no, operation_name):
                return op
        return None

    def operations_for(self, operator_no: int) -> list[OperatorOperation]:
        return [op for op in self.operations if op.operator_no == operator_no]

    def entries_for(self, operation: OperatorOperation) -> list[HourlyEntry]:
        """Entries of an operation, in slot order."""
        order = {label: i for i, label in enumerate(self.slot_labels)}
        found = [e for e in self.entries.values() if e.operation_key == operation.key]
        return sorted(found, key=lambda e: order.get(e.slot_label, len(order)))

    def record_entry(self, entry: HourlyEntry) -> None:
        """Insert or overwrite the entry for its (operation, slot)."""
        self.entries[entry.key] = entry

    def remove_operation(self, operator_no: int, operation_name: str) -> bool:
        """Remove an operation and every entry recorded against it."""
        key = (operator_no, operation_name)
        before = len(self.operations)
        self.operations = [op for op in self.operations if op.key != key]
        self.entries = {
            k: e for k, e in self.entries.items() if e.operation_key != key
        }
        return len(self.operations) != before
