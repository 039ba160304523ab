"""
TrailBuffer - bounded FIFO of visual units with delayed removal

Inserting beyond max_points evicts from the head. An evicted unit starts its
exit transition and is detached from the visual tree after exit_duration by
exactly one scheduled removal.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional

from host.frame_clock import FrameClock, TimerHandle
from models.enums import TrailUnitState
from models.geometry import Point
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SAMPLING)


@dataclass(eq=False)
class TrailUnit:
    """One emitted visual unit"""
    position: Point
    created_at: float
    handle: Any = None                   # visual node, detached on removal
    state: TrailUnitState = TrailUnitState.ACTIVE
    data: Dict[str, Any] = field(default_factory=dict)
    _removal: Optional[TimerHandle] = field(default=None, repr=False)
    _expiry: Optional[TimerHandle] = field(default=None, repr=False)


UnitCallback = Callable[[TrailUnit], None]


class TrailBuffer:
    """
    Bounded trail of emitted units

    Args:
        clock: FrameClock providing now() and call_later()
        max_points: Maximum number of ACTIVE units (>= 1)
        exit_duration: Seconds between eviction and removal
        on_exit: Called when a unit starts its exit transition
        on_removed: Called after a unit was detached

    Example:
        trail = TrailBuffer(clock, max_points=5, exit_duration=0.5)
        for p in points:
            trail.push(Point(*p), handle=node)
    """

    def __init__(
        self,
        clock: FrameClock,
        max_points: int,
        exit_duration: float,
        on_exit: Optional[UnitCallback] = None,
        on_removed: Optional[UnitCallback] = None,
    ):
        if max_points < 1:
            raise ValueError("max_points must be >= 1")
        if exit_duration < 0:
            raise ValueError("exit_duration must be >= 0")
        self.clock = clock
        self.max_points = max_points
        self.exit_duration = exit_duration
        self.on_exit = on_exit
        self.on_removed = on_removed
        self._active: Deque[TrailUnit] = deque()
        self._exiting: List[TrailUnit] = []
        self.removed_count = 0

    def push(
        self,
        position: Point,
        handle: Any = None,
        lifetime: Optional[float] = None,
        **data: Any,
    ) -> TrailUnit:
        """
        Append a unit; evicts from the head while over max_points.

        lifetime: evict this unit automatically after that many seconds
        """
        unit = TrailUnit(position=position, created_at=self.clock.now(), handle=handle, data=data)
        self._active.append(unit)
        if lifetime is not None:
            unit._expiry = self.clock.call_later(lifetime, lambda: self._expire(unit))
        while len(self._active) > self.max_points:
            self._begin_exit(self._active.popleft())
        return unit

    def evict_oldest(self) -> Optional[TrailUnit]:
        """Start the exit transition of the oldest active unit"""
        if not self._active:
            return None
        unit = self._active.popleft()
        self._begin_exit(unit)
        return unit

    def _expire(self, unit: TrailUnit) -> None:
        if unit.state is not TrailUnitState.ACTIVE:
            return
        try:
            self._active.remove(unit)
        except ValueError:
            return
        self._begin_exit(unit)

    def _begin_exit(self, unit: TrailUnit) -> None:
        if unit.state is not TrailUnitState.ACTIVE:
            return
        unit.state = TrailUnitState.EXITING
        if unit._expiry is not None:
            unit._expiry.cancel()
            unit._expiry = None
        self._exiting.append(unit)
        if self.on_exit:
            self.on_exit(unit)
        unit._removal = self.clock.call_later(self.exit_duration, lambda: self._finish(unit))

    def _finish(self, unit: TrailUnit) -> None:
        if unit.state is TrailUnitState.REMOVED:
            return
        unit.state = TrailUnitState.REMOVED
        unit._removal = None
        if unit in self._exiting:
            self._exiting.remove(unit)
        self._detach(unit)
        self.removed_count += 1
        if self.on_removed:
            self.on_removed(unit)

    @staticmethod
    def _detach(unit: TrailUnit) -> None:
        remove = getattr(unit.handle, "remove", None)
        if callable(remove):
            remove()

    def clear(self) -> None:
        """
        Remove everything now: cancel pending exits and expiries, detach
        every handle. Used at destroy.
        """
        for unit in list(self._active) + list(self._exiting):
            for timer in (unit._expiry, unit._removal):
                if timer is not None:
                    timer.cancel()
            unit._expiry = unit._removal = None
            if unit.state is not TrailUnitState.REMOVED:
                unit.state = TrailUnitState.REMOVED
                self._detach(unit)
        self._active.clear()
        self._exiting.clear()

    @property
    def active_units(self) -> List[TrailUnit]:
        return list(self._active)

    @property
    def exiting_units(self) -> List[TrailUnit]:
        return list(self._exiting)

    @property
    def newest(self) -> Optional[TrailUnit]:
        return self._active[-1] if self._active else None

    @property
    def oldest(self) -> Optional[TrailUnit]:
        return self._active[0] if self._active else None

    def __len__(self) -> int:
        return len(self._active)
