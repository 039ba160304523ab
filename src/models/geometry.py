"""
2D geometry value types used by pointer sampling
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EPSILON = 1e-10


@dataclass(frozen=True)
class Point:
    """Immutable 2D point / vector in CSS pixels"""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: Point, t: float) -> Point:
        """Linear interpolation towards other (t=0 → self, t=1 → other)"""
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def is_zero(self) -> bool:
        return abs(self.x) < EPSILON and abs(self.y) < EPSILON

    def to_tuple(self) -> tuple:
        return (self.x, self.y)


@dataclass(frozen=True)
class Rect:
    """Bounding box, same shape as getBoundingClientRect()"""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2, self.top + self.height / 2)

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def local(self, point: Point) -> Point:
        """Convert viewport coordinates to coordinates relative to the top-left corner"""
        return Point(point.x - self.left, point.y - self.top)
