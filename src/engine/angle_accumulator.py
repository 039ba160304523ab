"""
Angle continuity

Raw pointer bearings wrap at ±180°. The accumulator adds the signed shortest
delta per sample so the running total never jumps by 360°.
"""

import math
from typing import Optional

from utils.math_helpers import normalize_angle, pointer_angle, shortest_angle_delta


class AngleAccumulator:
    """
    Unbounded rotation total built from wrapped angle samples

    Example:
        acc = AngleAccumulator()
        acc.update(170)    # 170.0
        acc.update(-170)   # 190.0 (delta +20, not -340)
    """

    def __init__(self):
        self.last_angle: Optional[float] = None
        self.total_rotation = 0.0

    def update(self, raw_degrees: float) -> float:
        """Feed a raw angle (any range); non-finite input leaves state unchanged"""
        if not math.isfinite(raw_degrees):
            return self.total_rotation

        angle = normalize_angle(raw_degrees)
        if self.last_angle is None:
            self.total_rotation = angle
        else:
            self.total_rotation += shortest_angle_delta(self.last_angle, angle)
        self.last_angle = angle
        return self.total_rotation

    def update_from_vector(self, dx: float, dy: float) -> float:
        """Feed a direction vector; zero-length vectors mean no rotation change"""
        angle = pointer_angle(dx, dy)
        if angle is None:
            return self.total_rotation
        return self.update(angle)

    def reset(self) -> None:
        self.last_angle = None
        self.total_rotation = 0.0
