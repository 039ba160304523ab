"""
FrameClock - cooperative frame scheduler interface

The sampling loop never calls a scheduling primitive directly. The host
provides a FrameClock: a real display-frame timer in production
(AsyncioFrameClock), a manually advanced clock in tests (ManualFrameClock).
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HOST)

# (now, dt) in seconds
FrameCallback = Callable[[float, float], None]


class TimerHandle:
    """Handle for a deferred callback; cancel() before it fires to drop it"""

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._on_cancel: Optional[Callable[[], None]] = None

    def cancel(self) -> None:
        if self.cancelled or self.fired:
            return
        self.cancelled = True
        if self._on_cancel:
            self._on_cancel()

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def fire(self) -> None:
        if not self.pending:
            return
        self.fired = True
        try:
            self.callback()
        except Exception as e:
            log.error("Timer callback failed", error=str(e))


class FrameClock(Protocol):
    """Host-provided scheduler"""

    def now(self) -> float:
        ...

    def subscribe(self, callback: FrameCallback) -> int:
        """Call callback once per frame until unsubscribed; returns handle"""
        ...

    def unsubscribe(self, handle: int) -> None:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ManualFrameClock:
    """
    Deterministic clock for tests and offline runs

    Example:
        clock = ManualFrameClock()
        clock.subscribe(lambda now, dt: ...)
        clock.tick(3)          # three frames at 1/60 s
        clock.advance(0.5)     # timers only, no frames
    """

    def __init__(self, start: float = 0.0, frame_interval: float = 1 / 60):
        self._now = start
        self.frame_interval = frame_interval
        self._subscribers: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()
        self.frames_emitted = 0

    def now(self) -> float:
        return self._now

    def subscribe(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._subscribers[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._timers, (handle.deadline, next(self._seq), handle))
        return handle

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, h in self._timers if h.pending)

    def _run_timers(self, until: float) -> None:
        while self._timers and self._timers[0][0] <= until:
            deadline, _, handle = heapq.heappop(self._timers)
            self._now = max(self._now, deadline)
            handle.fire()
        self._now = until

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in deadline order"""
        self._run_timers(self._now + seconds)

    def tick(self, frames: int = 1, dt: Optional[float] = None) -> None:
        """Emit frames; due timers fire before each frame's callbacks"""
        step = self.frame_interval if dt is None else dt
        for _ in range(frames):
            self._run_timers(self._now + step)
            self.frames_emitted += 1
            for handle, callback in list(self._subscribers.items()):
                if handle not in self._subscribers:
                    continue
                try:
                    callback(self._now, step)
                except Exception as e:
                    log.error("Frame callback failed", error=str(e))
