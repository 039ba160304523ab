"""
3D Card Hover - tilt a card toward the pointer

The element keeps only `perspective`; its children move into an inner
wrapper that receives the rotation. Tilt is (dx, -dy) / rotate_divisor
degrees around the card centre, eased per frame, and returns to flat on
pointer leave.
"""

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent
from managers.class_manager import bem
from models.geometry import Point, Rect
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

FLAT = Point(0.0, 0.0)


def tilt_for(pointer: Point, box: Rect, divisor: float) -> Point:
    """(rotateY, rotateX) in degrees for a pointer over box"""
    delta = pointer - box.center
    return Point(delta.x / divisor, -delta.y / divisor)


class CardHover3D(BaseEffect):

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        config = instance.config

        inner = self.services.document.create_element("div")
        inner.class_list.add(bem("3d-card-hover", "inner"))
        inner.style.set_property("transition", config["transition"])
        inner.style.set_property("will-change", "transform")
        original = list(owner.children)
        owner.replace_children(inner)
        for child in original:
            inner.append_child(child)
        owner.style.set_property("perspective", f"{config['perspective']}px")

        rect = self.cached_rect(owner)

        def on_frame(session: SamplingSession, _dt: float):
            tilt = session.current
            inner.style.set_property(
                "transform", f"translateZ(0) rotateY({tilt.x:.3f}deg) rotateX({tilt.y:.3f}deg)"
            )

        session = self.session(
            instance,
            SamplingProfile(
                smoothing_factor=self.setting("smoothing", 0.2),
                settle_epsilon=self.setting("settle_epsilon", 0.01),
                release_when_settled=True,
                snap_first=False,
            ),
            SamplingCallbacks(on_frame=on_frame),
        )

        def on_move(event: DomEvent):
            box = rect.get()
            if box is None or event.point is None:
                return
            session.set_target(tilt_for(event.point, box, instance.config["rotate_divisor"]))

        def on_leave(_event: DomEvent):
            session.set_target(FLAT)

        def on_resize(_event: DomEvent):
            rect.invalidate()

        self.listen(instance, inner, "pointermove", on_move)
        self.listen(instance, inner, "pointerleave", on_leave)
        self.listen(instance, self.services.document, "resize", on_resize)

        instance.runtime["inner"] = inner
        instance.runtime["session"] = session

    def on_update(self, instance: Instance, previous) -> None:
        inner = instance.runtime.get("inner")
        if inner is not None:
            inner.style.set_property("transition", instance.config["transition"])
        instance.owner.style.set_property("perspective", f"{instance.config['perspective']}px")

    def teardown(self, instance: Instance) -> None:
        owner = instance.owner
        inner = instance.runtime.pop("inner", None)
        if inner is not None:
            children = list(inner.children)
            inner.remove()
            for child in children:
                owner.append_child(child)
        owner.style.remove_property("perspective")
