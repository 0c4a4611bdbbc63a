import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def round_half_up_to(value: float, places: int) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor
