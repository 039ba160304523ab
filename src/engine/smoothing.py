"""
Exponential smoothing of pointer-driven targets

current += (target - current) * factor, once per frame.
"""

import math

from models.geometry import Point


def _check_factor(factor: float) -> float:
    if not (math.isfinite(factor) and 0.0 < factor <= 1.0):
        raise ValueError(f"Smoothing factor must be in (0, 1], got {factor}")
    return factor


class Smoother:
    """Scalar exponential smoother"""

    def __init__(self, factor: float, value: float = 0.0):
        self.factor = _check_factor(factor)
        self.current = value
        self.target = value

    def set_target(self, target: float) -> None:
        """Non-finite targets are ignored"""
        if math.isfinite(target):
            self.target = target

    def step(self) -> float:
        self.current += (self.target - self.current) * self.factor
        return self.current

    def snap(self) -> float:
        self.current = self.target
        return self.current

    def settled(self, epsilon: float = 0.01) -> bool:
        return abs(self.target - self.current) <= epsilon


class SmoothedPoint:
    """
    2D exponential smoother

    Example:
        sp = SmoothedPoint(0.1)
        sp.set_target(Point(100, 0))
        sp.step()   # Point(10.0, 0.0)
    """

    def __init__(self, factor: float, value: Point = Point()):
        self.factor = _check_factor(factor)
        self.current = value
        self.target = value
        self.initialized = False

    def set_target(self, target: Point, snap_first: bool = False) -> None:
        """
        Set a new target; non-finite points are ignored.

        snap_first: jump straight to the very first target instead of
        easing in from the origin
        """
        if not target.is_finite():
            return
        self.target = target
        if snap_first and not self.initialized:
            self.current = target
        self.initialized = True

    def step(self) -> Point:
        self.current = self.current.lerp(self.target, self.factor)
        return self.current

    def snap(self) -> Point:
        self.current = self.target
        return self.current

    def settled(self, epsilon: float = 0.01) -> bool:
        return self.current.distance_to(self.target) <= epsilon
