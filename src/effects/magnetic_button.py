"""
Magnetic Button - element drifts toward a nearby pointer

The magnet area is a circle around the element centre with radius
max(width, height) / 2 + padding. Inside it the target offset is
delta * force / strength with force = 1 - distance / radius; outside it
the target is the origin. The offset is eased every frame and frames are
released once it has settled.
"""

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent
from models.geometry import Point
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

ORIGIN = Point(0.0, 0.0)


def magnet_offset(pointer: Point, center: Point, width: float, height: float,
                  padding: float, strength: float) -> Point:
    """Target offset of the element for one pointer position"""
    delta = pointer - center
    distance = delta.magnitude()
    radius = max(width, height) / 2 + padding
    if radius <= 0 or distance >= radius:
        return ORIGIN
    force = max(0.0, 1 - distance / radius)
    return delta * (force / strength)


class MagneticButton(BaseEffect):

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        rect = self.cached_rect(owner)
        state = {"inside": False}

        def on_frame(session: SamplingSession, _dt: float):
            offset = session.current
            owner.style.set_property("transform", f"translate3d({offset.x:.3f}px, {offset.y:.3f}px, 0)")

        session = self.session(
            instance,
            SamplingProfile(
                smoothing_factor=self.setting("smoothing", 0.15),
                settle_epsilon=self.setting("settle_epsilon", 0.05),
                release_when_settled=True,
                snap_first=False,
            ),
            SamplingCallbacks(on_frame=on_frame),
        )

        def on_move(event: DomEvent):
            config = instance.config
            box = rect.get()
            if config["disabled"] or box is None or event.point is None:
                return
            target = magnet_offset(
                event.point, box.center, box.width, box.height,
                config["padding"], config["strength"],
            )
            inside = not target.is_zero()
            if inside != state["inside"]:
                state["inside"] = inside
                transition = config["active_transition"] if inside else config["inactive_transition"]
                owner.style.set_property("transition", transition)
            session.set_target(target)

        def on_leave(_event: DomEvent):
            if state["inside"]:
                state["inside"] = False
                owner.style.set_property("transition", instance.config["inactive_transition"])
            session.set_target(ORIGIN)

        def on_invalidate(_event: DomEvent):
            rect.invalidate()

        self.listen(instance, self.services.document, "pointermove", on_move)
        self.listen(instance, self.services.document, "pointerleave", on_leave)
        self.listen(instance, self.services.document, "resize", on_invalidate)
        self.listen(instance, owner, "pointerenter", on_invalidate)

        instance.runtime["session"] = session

    def teardown(self, instance: Instance) -> None:
        instance.owner.style.remove_property("transform")
        instance.owner.style.remove_property("transition")
