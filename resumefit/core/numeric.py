from __future__ import annotations

import math


def clamp01(x: float) -> float:
    if not math.isfinite(x):
        return 0.0
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; every score here rounds .5 up.
    return math.floor(x + 0.5)


def percent(numerator: float, denominator: float) -> int:
    """Half-up rounded percentage; 0 when the denominator is empty."""
    if not denominator:
        return 0
    return round_half_up(100.0 * numerator / denominator)
