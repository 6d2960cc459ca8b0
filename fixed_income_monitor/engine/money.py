"""Currency rounding applied at output boundaries."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def to_cents(value: float) -> float:
    """Round half-up to two decimal places.

    Goes through ``str`` so that e.g. 0.125 rounds to 0.13 rather than
    following its binary representation down to 0.12.

    Infinite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))
