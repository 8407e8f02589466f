"""
Numeric helpers shared by the market engines.

Rounding is half-up (0.5 always rounds towards +inf), not Python's
banker's rounding, so scores match the published tables.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from app.domain.market.errors import EngineComputationError

_ONE = Decimal("1")
_TENTH = Decimal("0.1")


def clamp(value: float, lower: float, upper: float) -> float:
    """Return value limited to the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return int(Decimal(repr(value)).quantize(_ONE, rounding=ROUND_HALF_UP))


def round_tenth(value: float) -> float:
    """Round to one decimal place, halves rounding up."""
    return float(Decimal(repr(value)).quantize(_TENTH, rounding=ROUND_HALF_UP))


def ensure_finite(engine: str, field_name: str, value: float) -> float:
    """Return value unchanged, or raise if it is NaN or infinite.

    Raises:
        EngineComputationError: If value is not a finite number.
    """
    if not math.isfinite(value):
        raise EngineComputationError(engine, field_name, value)
    return value
