"""
Distance-gated emission

Turns a stream of pointer samples into discrete emission points spaced at
least `threshold` apart. Large jumps are subdivided so fast motion keeps a
constant visual density.
"""

import math
from typing import List, Optional

from models.geometry import Point


class DistanceGate:
    """
    Emits points once the pointer has moved `threshold` away from the last
    emission.

    Args:
        threshold: Minimum spacing between emissions (> 0)
        subdivide: Emit floor(d / threshold) evenly spaced points for a jump
            of length d; otherwise emit a single point at the sample
        max_emissions: Keep only the newest N points of one huge jump

    Example:
        gate = DistanceGate(80)
        gate.feed(Point(0, 0))     # [Point(0, 0)]  first sample anchors
        gate.feed(Point(240, 0))   # [Point(80, 0), Point(160, 0), Point(240, 0)]
    """

    def __init__(self, threshold: float, subdivide: bool = True, max_emissions: Optional[int] = None):
        if not (math.isfinite(threshold) and threshold > 0):
            raise ValueError(f"threshold must be a positive number, got {threshold}")
        if max_emissions is not None and max_emissions < 1:
            raise ValueError("max_emissions must be >= 1")
        self.threshold = threshold
        self.subdivide = subdivide
        self.max_emissions = max_emissions
        self.last_emitted: Optional[Point] = None

    def feed(self, sample: Point) -> List[Point]:
        """Process one sample; returns the emitted points (possibly empty)"""
        if not sample.is_finite():
            return []

        if self.last_emitted is None:
            self.last_emitted = sample
            return [sample]

        distance = self.last_emitted.distance_to(sample)
        if not math.isfinite(distance) or distance < self.threshold:
            return []

        if not self.subdivide:
            self.last_emitted = sample
            return [sample]

        steps = int(distance // self.threshold)
        origin = self.last_emitted
        first = 1
        if self.max_emissions is not None and steps > self.max_emissions:
            first = steps - self.max_emissions + 1
        dx = sample.x - origin.x
        dy = sample.y - origin.y
        points = [
            Point(
                origin.x + dx * (self.threshold * i) / distance,
                origin.y + dy * (self.threshold * i) / distance,
            )
            for i in range(first, steps + 1)
        ]
        self.last_emitted = points[-1]
        return points

    def distance_from_last(self, sample: Point) -> float:
        if self.last_emitted is None or not sample.is_finite():
            return 0.0
        return self.last_emitted.distance_to(sample)

    def anchor(self, point: Point) -> None:
        """Move the emission anchor without emitting"""
        if point.is_finite():
            self.last_emitted = point

    def reset(self) -> None:
        self.last_emitted = None
