"""Validation module for verifying production run consistency."""

from sewline.validation.validator import (
    PlanValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "PlanValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
