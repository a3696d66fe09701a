from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]

_CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.35 as 0.35 instead of its binary expansion
    return Decimal(str(value))


def round_half_up(value: Number) -> int:
    return int(to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_cents(value: Number) -> float:
    return float(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def clamp_int(value: int, min_value: int = 0, max_value: int = 100) -> int:
    return max(min_value, min(max_value, value))


def clamp_decimal(value: Decimal, min_value: Number = 0, max_value: Number = 100) -> Decimal:
    low = to_decimal(min_value)
    high = to_decimal(max_value)
    return max(low, min(high, value))
