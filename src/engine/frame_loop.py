"""
FrameLoop - shared per-frame dispatcher for all sampling instances

Subscribes to the FrameClock lazily on the first request and unsubscribes
when the last requester is released, so an idle page does no frame work.
"""

from typing import Any, Callable, Dict, Hashable, Optional

from host.frame_clock import FrameClock
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SAMPLING)

# (now, dt)
FrameRequest = Callable[[float, float], Any]


class FrameLoop:
    """
    Multiplexes one clock subscription over many requesters

    Example:
        loop = FrameLoop(clock)
        loop.request(instance_key, step)   # clock subscription starts
        loop.release(instance_key)         # last one → clock unsubscribed
    """

    def __init__(self, clock: FrameClock):
        self.clock = clock
        self._requests: Dict[Hashable, FrameRequest] = {}
        self._handle: Optional[int] = None
        self.frames = 0

    def request(self, key: Hashable, callback: FrameRequest) -> None:
        """Register (or replace) the per-frame callback for key"""
        self._requests[key] = callback
        self._ensure_running()

    def release(self, key: Hashable) -> None:
        """Stop calling key's callback; takes effect immediately, even mid-frame"""
        if self._requests.pop(key, None) is not None:
            self._stop_if_idle()

    def is_requested(self, key: Hashable) -> bool:
        return key in self._requests

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def requester_count(self) -> int:
        return len(self._requests)

    def _ensure_running(self) -> None:
        if self._handle is None:
            self._handle = self.clock.subscribe(self._on_frame)
            log.debug("Frame loop subscribed")

    def _stop_if_idle(self) -> None:
        if not self._requests and self._handle is not None:
            self.clock.unsubscribe(self._handle)
            self._handle = None
            log.debug("Frame loop unsubscribed", frames=self.frames)

    def _on_frame(self, now: float, dt: float) -> None:
        self.frames += 1
        for key, callback in list(self._requests.items()):
            if self._requests.get(key) is not callback:
                continue
            try:
                callback(now, dt)
            except Exception as e:
                log.error("Frame request failed", key=repr(key), error=str(e))
        self._stop_if_idle()

    def stop_all(self) -> None:
        self._requests.clear()
        self._stop_if_idle()
