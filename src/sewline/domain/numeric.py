"""Numeric coercion helpers shared by every calculation.

Values arriving from data entry are frequently incomplete: blank strings,
``None``, ``NaN`` or text typed into a numeric field. Every calculation in
this package funnels such values through :func:`safe_number` so that an
incomplete record yields a zero result instead of an exception.
"""

import math
from decimal import Decimal
from typing import Any


def safe_number(value: Any, fallback: float = 0.0) -> float:
    """Return ``value`` as a finite float, or ``fallback``.

    Args:
        value: Anything supplied by a caller (number, numeric string, None...).
        fallback: Value returned when ``value`` has no finite interpretation.

    Returns:
        The float interpretation of ``value`` if it is finite, else ``fallback``.

    Example:
        >>> safe_number("18.5")
        18.5
        >>> safe_number(None)
        0.0
        >>> safe_number("abc", fallback=0.7)
        0.7
    """
    if value is None or isinstance(value, bool):
        return fallback

    if isinstance(value, Decimal):
        value = float(value)

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback

    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback

    if not math.isfinite(number):
        return fallback
    return number


def round2(value: Any) -> float:
    """Round a coerced value to 2 decimals."""
    return round(safe_number(value), 2)
