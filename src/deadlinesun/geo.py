"""Angle and circular-arithmetic helpers shared by every computation layer."""

import math

EARTH_RADIUS_KM = 6371.0
MINUTES_PER_DAY = 1440


def wrap180(value: float) -> float:
    """Wrap a longitude-like angle into (-180, 180]. -180 folds to +180."""
    wrapped = (value + 180.0) % 360.0 - 180.0
    return 180.0 if wrapped == -180.0 else wrapped


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def degrees_to_radians(value: float) -> float:
    return value * math.pi / 180.0


def radians_to_degrees(value: float) -> float:
    return value * 180.0 / math.pi


def circular_minute_difference(a: float, b: float) -> float:
    """Shortest distance between two minutes-of-day around a 1440-minute clock face.

    Args:
        a: Minute of day (may be outside 0..1439; wraps).
        b: Minute of day (may be outside 0..1439; wraps).

    Returns:
        Distance in minutes, in [0, 720].
    """
    raw = abs((a - b) % MINUTES_PER_DAY)
    return min(raw, MINUTES_PER_DAY - raw)
