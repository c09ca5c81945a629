"""Rounding helpers shared by the scoring and pricing engines."""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (47.5 -> 48)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage of ``part`` in ``whole``; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
