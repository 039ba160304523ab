"""
Interactive Sampling Loop

The generalized shape behind pointer-reactive effects. An effect configures
a SamplingSession with a SamplingProfile (constants) and SamplingCallbacks
(visual side effects); the session combines:

- exponential smoothing of the pointer target, stepped once per frame
- distance-gated emission of discrete units, with gap subdivision
- a bounded trail with delayed, single-scheduled removal
- idle tracking that resets the stacking counter between bursts
- lazy frame requests through the shared FrameLoop
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, List, Optional

from engine.distance_gate import DistanceGate
from engine.frame_loop import FrameLoop
from engine.smoothing import SmoothedPoint
from engine.trail_buffer import TrailBuffer, TrailUnit
from host.frame_clock import FrameClock
from models.geometry import Point
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SAMPLING)


class IdleTracker:
    """
    Counts visual units in flight

    Idle = no emission since the last in-flight unit finished.
    """

    def __init__(self):
        self.active_count = 0
        self.is_idle = True

    def on_unit_started(self) -> None:
        self.active_count += 1
        self.is_idle = False

    def on_unit_finished(self) -> bool:
        """Returns True when this finish made the tracker idle"""
        self.active_count = max(0, self.active_count - 1)
        if self.active_count == 0 and not self.is_idle:
            self.is_idle = True
            return True
        return False

    def reset(self) -> None:
        self.active_count = 0
        self.is_idle = True


class StackingCounter:
    """Monotonic z-index source, reset when the effect goes idle"""

    def __init__(self, start: int = 1):
        self.start = start
        self.value = start

    def next(self) -> int:
        current = self.value
        self.value += 1
        return current

    def reset(self) -> None:
        self.value = self.start


@dataclass(frozen=True)
class SamplingProfile:
    """
    Constants of one sampling effect

    threshold None disables the distance gate; max_points 0 disables the
    trail buffer.
    """
    smoothing_factor: float = 1.0
    threshold: Optional[float] = None
    subdivide: bool = True
    max_emissions: Optional[int] = None
    max_points: int = 0
    exit_duration: float = 0.0
    unit_lifetime: Optional[float] = None
    settle_epsilon: float = 0.01
    release_when_settled: bool = False
    snap_first: bool = True
    use_frames: bool = True


@dataclass
class SamplingCallbacks:
    """Visual side effects driven by the session"""
    on_frame: Optional[Callable[["SamplingSession", float], None]] = None
    on_emit: Optional[Callable[["SamplingSession", Point], Any]] = None
    on_exit: Optional[Callable[[TrailUnit], None]] = None
    on_removed: Optional[Callable[[TrailUnit], None]] = None
    on_idle: Optional[Callable[["SamplingSession"], None]] = None
    on_start: Optional[Callable[["SamplingSession"], None]] = None
    on_stop: Optional[Callable[["SamplingSession"], None]] = None


class SamplingSession:
    """
    Per-instance sampling state

    Example:
        session = SamplingSession(key, frame_loop, clock, profile, callbacks)
        session.feed(Point(120, 40))   # pointer move
        ...
        session.dispose()              # destroy
    """

    def __init__(
        self,
        key: Hashable,
        frame_loop: FrameLoop,
        clock: FrameClock,
        profile: SamplingProfile,
        callbacks: Optional[SamplingCallbacks] = None,
    ):
        self.key = key
        self.frame_loop = frame_loop
        self.clock = clock
        self.profile = profile
        self.callbacks = callbacks or SamplingCallbacks()

        self.smoothed = SmoothedPoint(profile.smoothing_factor)
        self.gate = (
            DistanceGate(profile.threshold, profile.subdivide, profile.max_emissions)
            if profile.threshold is not None else None
        )
        self.trail = (
            TrailBuffer(
                clock,
                profile.max_points,
                profile.exit_duration,
                on_exit=self.callbacks.on_exit,
                on_removed=self._on_unit_removed,
            )
            if profile.max_points > 0 else None
        )
        self.idle = IdleTracker()
        self.stacking = StackingCounter()

        self.latest_sample: Optional[Point] = None
        self.running = False
        self.paused = False
        self.disposed = False
        self.emissions = 0

    # === Input ===

    def feed(self, sample: Point) -> List[Point]:
        """
        Record a pointer sample: sets the smoothing target, runs the
        distance gate, and makes sure frames are requested.

        Returns:
            Points emitted for this sample
        """
        if self.disposed or not sample.is_finite():
            return []
        self.latest_sample = sample
        self.smoothed.set_target(sample, snap_first=self.profile.snap_first)

        emitted: List[Point] = []
        if self.gate is not None:
            emitted = self.gate.feed(sample)
            for point in emitted:
                self.emit(point)

        if self.profile.use_frames:
            self.start()
        return emitted

    def set_target(self, target: Point) -> None:
        """Move the smoothing target without sampling (e.g. pointer leave → origin)"""
        if self.disposed:
            return
        self.smoothed.set_target(target)
        self.start()

    def emit(self, point: Point) -> Optional[TrailUnit]:
        """Emit one discrete unit at point (also used for click-driven units)"""
        if self.disposed:
            return None
        self.emissions += 1
        self.idle.on_unit_started()
        handle = self.callbacks.on_emit(self, point) if self.callbacks.on_emit else None
        if self.trail is not None:
            return self.trail.push(point, handle=handle, lifetime=self.profile.unit_lifetime)
        return None

    def unit_finished(self) -> None:
        """Report completion of a unit that is not tracked by the trail"""
        if self.idle.on_unit_finished():
            self._went_idle()

    def _on_unit_removed(self, unit: TrailUnit) -> None:
        if self.callbacks.on_removed:
            self.callbacks.on_removed(unit)
        self.unit_finished()

    def _went_idle(self) -> None:
        self.stacking.reset()
        if self.callbacks.on_idle:
            self.callbacks.on_idle(self)

    # === Frame requests ===

    def start(self) -> None:
        if self.running or self.paused or self.disposed:
            return
        self.running = True
        self.frame_loop.request(self.key, self._step)
        if self.callbacks.on_start:
            self.callbacks.on_start(self)

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self.frame_loop.release(self.key)
        if self.callbacks.on_stop:
            self.callbacks.on_stop(self)

    def pause(self) -> None:
        self.stop()
        self.paused = True

    def resume(self) -> None:
        self.paused = False
        self.start()

    def _step(self, now: float, dt: float) -> None:
        self.smoothed.step()
        settled = self.profile.release_when_settled and self.smoothed.settled(self.profile.settle_epsilon)
        if settled:
            self.smoothed.snap()

        if self.callbacks.on_frame:
            self.callbacks.on_frame(self, dt)

        if settled and (self.trail is None or not self.trail.exiting_units):
            self.stop()

    # === Teardown ===

    def dispose(self) -> None:
        """Stop frames and drop every visual unit immediately"""
        if self.disposed:
            return
        self.stop()
        if self.trail is not None:
            self.trail.clear()
        self.idle.reset()
        self.disposed = True
        log.debug("Sampling session disposed", key=repr(self.key), emissions=self.emissions)

    @property
    def current(self) -> Point:
        return self.smoothed.current
