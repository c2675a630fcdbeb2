"""Money / rounding helpers.

Centralized so the ledger, rate cache, and API responses use identical
rounding semantics. Amounts stay ``Decimal`` at full precision internally;
``round2`` is applied where a value is fixed (converted expense amounts)
and ``display`` at presentation boundaries.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, float, int, str]

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.92 from expanding into binary noise
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def display(value: Number) -> float:
    return float(round2(value))
