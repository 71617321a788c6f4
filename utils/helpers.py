"""helpers.py - Reusable utility functions."""

import math

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Constrain *value* to the closed range [lo, hi]."""
    return max(lo, min(hi, value))


def distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Euclidean distance between two (x, y) points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def population_stddev(values) -> float:
    """Population standard deviation (0.0 for an empty sequence)."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (2.25 -> 2.3), unlike banker's round()."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale
