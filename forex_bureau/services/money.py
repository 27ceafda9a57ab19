"""Money / rounding helpers.

Centralized so the dashboard, calculator and rate board use identical
rounding semantics.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
import math
from typing import Any


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round4(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP))


def to_number(value: Any) -> float:
    """Coerce a stored field to a float; NaN when it cannot be read as a number."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def is_positive_number(value: Any) -> bool:
    number = to_number(value)
    return math.isfinite(number) and number > 0
