"""
Numeric coercion shared by the calculation engines.

Engines never reject input: anything that is not a usable number
becomes 0 so every call still returns a renderable result.
"""

import math
from typing import Any


def to_number(value: Any) -> float:
    """Coerce a raw input to a finite float, falling back to 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def to_non_negative(value: Any) -> float:
    """Coerce a raw input to a finite float clamped at 0."""
    return max(0.0, to_number(value))


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, substituting 0 for a zero denominator."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up; non-finite values pass through."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def power(base: float, exponent: float) -> float:
    """`base ** exponent`, saturating to infinity instead of raising OverflowError."""
    try:
        return base ** exponent
    except OverflowError:
        return math.inf
