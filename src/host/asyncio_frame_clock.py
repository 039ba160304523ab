"""
AsyncioFrameClock - production FrameClock on an asyncio event loop

Runs a single render task at a fixed rate, only while at least one frame
subscriber exists.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from typing import Callable, Dict, Optional

from host.frame_clock import FrameCallback, TimerHandle
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HOST)


class AsyncioFrameClock:
    """Frame clock backed by asyncio.sleep / loop.call_later"""

    def __init__(self, fps: int = 60, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            fps: Target frame rate (1-240, default 60)
            loop: Event loop; defaults to the running loop at first use
        """
        self.fps = max(1, min(fps, 240))
        self._loop = loop
        self._subscribers: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)
        self._task: Optional[asyncio.Task] = None
        self._last = time.perf_counter()
        self.frames_emitted = 0

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return time.perf_counter()

    def subscribe(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._subscribers[handle] = callback
        if self._task is None or self._task.done():
            self._last = time.perf_counter()
            self._task = self._get_loop().create_task(self._render_loop())
            log.debug("Frame loop started", fps=self.fps)
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self.now() + max(0.0, delay), callback)
        native = self._get_loop().call_later(max(0.0, delay), handle.fire)
        handle._on_cancel = native.cancel
        return handle

    async def _render_loop(self) -> None:
        """Render loop @ target FPS; exits when the last subscriber leaves"""
        frame_delay = 1.0 / self.fps
        while self._subscribers:
            now = time.perf_counter()
            dt = now - self._last
            self._last = now
            for handle, callback in list(self._subscribers.items()):
                if handle not in self._subscribers:
                    continue
                try:
                    callback(now, dt)
                except Exception as e:
                    log.error("Frame callback failed", error=str(e))
            self.frames_emitted += 1
            await asyncio.sleep(frame_delay)
        log.debug("Frame loop idle, stopped", frames=self.frames_emitted)

    async def stop(self) -> None:
        """Drop all subscribers and wait for the render task to finish"""
        self._subscribers.clear()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
