# Shared numeric helpers for set and weight arithmetic.
# Python's round() rounds half to even; set counts and loads round half up.
from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round to ``ndigits`` decimals with halves rounded away from zero.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value (use round_int for whole numbers)
    """
    factor = 10 ** ndigits
    # Absorb float noise such as 0.1 * 3 * 10 == 2.9999999999999996
    scaled = round(abs(value) * factor, 9)
    return math.copysign(math.floor(scaled + 0.5) / factor, value)


def round_int(value: float) -> int:
    """Round half up to an int."""
    return int(round_half_up(value))


def ceil_int(value: float) -> int:
    """Ceiling that ignores float noise (e.g. 10 * 0.7 == 7.000000000000001)."""
    return math.ceil(round(value, 9))
