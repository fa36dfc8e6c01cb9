"""
Price Rounding

Prices and indicator values are stored at cent precision. Ties round away
from zero on the exact binary value: 0.625 becomes 0.63, while 1.005 (stored
as 1.00499...) becomes 1.0.
"""

import math
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_cents(value: float) -> float:
    """Round to 2 decimals, half away from zero."""
    return float(Decimal(float(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)
