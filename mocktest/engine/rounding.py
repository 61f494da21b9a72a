"""Rounding helpers.

Python's ``round`` rounds halves to even; stored and displayed figures round
halves up (2.5 -> 3, 12.345 -> 12.35 when representable).
"""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round2(value: float) -> float:
    return round_half_up(value, 2)


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> float:
    """part/whole as a percentage, 0 when whole is 0."""
    if not whole:
        return 0.0
    return part / whole * 100
