"""
Tests for FrameLoop (lazy clock subscription) and TrailBuffer (bounded
trail with single-scheduled delayed removal).
"""

import pytest

from engine.frame_loop import FrameLoop
from engine.trail_buffer import TrailBuffer
from host.frame_clock import ManualFrameClock
from models.enums import TrailUnitState
from models.geometry import Point


class Node:
    """Visual node stand-in that counts detaches"""

    def __init__(self):
        self.removed = 0

    def remove(self):
        self.removed += 1


@pytest.fixture
def clock():
    return ManualFrameClock()


class TestFrameLoop:

    def test_idle_until_requested(self, clock):
        loop = FrameLoop(clock)
        assert not loop.is_running
        assert clock.subscriber_count == 0

        loop.request("a", lambda now, dt: None)

        assert loop.is_running
        assert clock.subscriber_count == 1

    def test_one_subscription_for_many_requesters(self, clock):
        loop = FrameLoop(clock)
        calls = []
        loop.request("a", lambda now, dt: calls.append("a"))
        loop.request("b", lambda now, dt: calls.append("b"))

        clock.tick()

        assert clock.subscriber_count == 1
        assert calls == ["a", "b"]
        assert loop.frames == 1

    def test_last_release_unsubscribes(self, clock):
        loop = FrameLoop(clock)
        loop.request("a", lambda now, dt: None)
        loop.request("b", lambda now, dt: None)

        loop.release("a")
        assert loop.is_running
        loop.release("b")
        assert not loop.is_running
        assert clock.subscriber_count == 0

    def test_release_mid_frame_takes_effect(self, clock):
        loop = FrameLoop(clock)
        calls = []
        loop.request("a", lambda now, dt: loop.release("b"))
        loop.request("b", lambda now, dt: calls.append("b"))

        clock.tick()

        assert calls == []
        assert loop.requester_count == 1

    def test_callback_receives_time(self, clock):
        loop = FrameLoop(clock)
        seen = []
        loop.request("a", lambda now, dt: seen.append((now, dt)))

        clock.tick(2, dt=0.5)

        assert seen == [(0.5, 0.5), (1.0, 0.5)]

    def test_failing_request_isolated(self, clock):
        loop = FrameLoop(clock)
        calls = []

        def broken(now, dt):
            raise RuntimeError("frame bug")

        loop.request("a", broken)
        loop.request("b", lambda now, dt: calls.append(now))
        clock.tick()

        assert len(calls) == 1

    def test_stop_all(self, clock):
        loop = FrameLoop(clock)
        loop.request("a", lambda now, dt: None)
        loop.stop_all()

        assert not loop.is_running
        assert not loop.is_requested("a")


class TestTrailBuffer:

    def test_eviction_over_capacity(self, clock):
        exits = []
        trail = TrailBuffer(clock, max_points=5, exit_duration=0.5, on_exit=exits.append)
        nodes = [Node() for _ in range(6)]
        for i, node in enumerate(nodes):
            trail.push(Point(i, 0), handle=node)

        assert len(trail) == 5
        assert trail.oldest.handle is nodes[1]
        assert trail.newest.handle is nodes[5]
        assert [u.handle for u in exits] == [nodes[0]]
        assert exits[0].state == TrailUnitState.EXITING

    def test_removal_after_exit_duration(self, clock):
        removed = []
        trail = TrailBuffer(clock, max_points=1, exit_duration=0.5, on_removed=removed.append)
        first = Node()
        trail.push(Point(0, 0), handle=first)
        trail.push(Point(1, 0), handle=Node())

        clock.advance(0.4)
        assert first.removed == 0

        clock.advance(0.15)
        assert first.removed == 1
        assert trail.removed_count == 1
        assert removed[0].state == TrailUnitState.REMOVED
        assert trail.exiting_units == []

    def test_exactly_one_removal_scheduled(self, clock):
        trail = TrailBuffer(clock, max_points=1, exit_duration=0.5)
        node = Node()
        trail.push(Point(0, 0), handle=node)
        trail.push(Point(1, 0))

        assert clock.pending_timers == 1
        clock.advance(5)
        assert node.removed == 1

    def test_lifetime_expiry(self, clock):
        trail = TrailBuffer(clock, max_points=8, exit_duration=0.1)
        node = Node()
        unit = trail.push(Point(0, 0), handle=node, lifetime=0.6)

        clock.advance(0.6)
        assert unit.state == TrailUnitState.EXITING
        assert len(trail) == 0

        clock.advance(0.15)
        assert node.removed == 1

    def test_evicted_unit_cancels_its_expiry(self, clock):
        trail = TrailBuffer(clock, max_points=1, exit_duration=0.1)
        trail.push(Point(0, 0), handle=Node(), lifetime=1.0)
        trail.push(Point(1, 0), handle=Node())

        # only the removal of the evicted unit is left
        assert clock.pending_timers == 1

    def test_evict_oldest(self, clock):
        trail = TrailBuffer(clock, max_points=3, exit_duration=0)
        assert trail.evict_oldest() is None

        trail.push(Point(0, 0), handle=Node())
        unit = trail.evict_oldest()

        assert unit.state == TrailUnitState.EXITING
        clock.advance(0)
        assert unit.state == TrailUnitState.REMOVED

    def test_clear_detaches_everything_now(self, clock):
        removed = []
        trail = TrailBuffer(clock, max_points=2, exit_duration=1.0, on_removed=removed.append)
        nodes = [Node() for _ in range(3)]
        for node in nodes:
            trail.push(Point(0, 0), handle=node, lifetime=2.0)

        trail.clear()

        assert [n.removed for n in nodes] == [1, 1, 1]
        assert clock.pending_timers == 0
        assert len(trail) == 0
        clock.advance(10)
        assert [n.removed for n in nodes] == [1, 1, 1]
        assert removed == []

    @pytest.mark.parametrize("max_points,exit_duration", [(0, 0.5), (3, -1)])
    def test_invalid_arguments(self, clock, max_points, exit_duration):
        with pytest.raises(ValueError):
            TrailBuffer(clock, max_points=max_points, exit_duration=exit_duration)
