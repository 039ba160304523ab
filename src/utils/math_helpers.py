"""
Numeric helpers for pointer sampling

Pure functions; every one of them is NaN/inf tolerant so malformed geometry
never leaks into visual output.
"""

import math
from typing import Optional

from models.geometry import EPSILON


def lerp(start: float, end: float, t: float) -> float:
    """
    Linear interpolation between start and end.

    Example:
        lerp(0, 100, 0.1)  # 10.0
    """
    return start + (end - start) * t


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp value to [min_value, max_value]"""
    return max(min_value, min(max_value, value))


def normalize_angle(degrees: float) -> float:
    """
    Wrap an angle into (-180, 180].

    Args:
        degrees: Any finite angle in degrees

    Returns:
        Equivalent angle in (-180, 180]

    Example:
        normalize_angle(190)   # -170.0
        normalize_angle(-180)  # 180.0
    """
    wrapped = math.fmod(degrees, 360.0)
    if wrapped <= -180.0:
        wrapped += 360.0
    elif wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def shortest_angle_delta(previous: float, current: float) -> float:
    """
    Signed shortest rotation from previous to current, in (-180, 180].

    Example:
        shortest_angle_delta(170, -170)   # 20.0
        shortest_angle_delta(-170, 170)   # -20.0
    """
    return normalize_angle(current - previous)


def pointer_angle(dx: float, dy: float) -> Optional[float]:
    """
    Bearing of vector (dx, dy) in degrees, normalized to (-180, 180].

    Returns None for a zero-length or non-finite vector so callers can treat
    it as "no rotation change".
    """
    if not (math.isfinite(dx) and math.isfinite(dy)):
        return None
    if abs(dx) < EPSILON and abs(dy) < EPSILON:
        return None
    return normalize_angle(math.degrees(math.atan2(dy, dx)))


def fold_half_turn(degrees: float) -> float:
    """
    Fold an angle into (-90, 90] so a glyph following the pointer never
    renders upside down.
    """
    angle = normalize_angle(degrees)
    if angle > 90.0:
        angle -= 180.0
    elif angle <= -90.0:
        angle += 180.0
    return angle


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Division that yields default for a zero or non-finite denominator"""
    if not math.isfinite(denominator) or abs(denominator) < EPSILON:
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default
