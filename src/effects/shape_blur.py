"""
Shape Blur - shader shape that follows the pointer

Rendering needs the `webgl` capability; without it the element only gets
the unsupported class. The effect owns the canvas and the uniform values a
renderer would read; the pointer uniform is damped per frame.
"""

import math
from typing import Any, Dict

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent
from managers.class_manager import bem
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

SHAPE_KEYS = ("variation", "shape_size", "roundness", "border_size", "circle_size", "circle_edge")


def damp_factor(damp: float, frame_interval: float) -> float:
    """Per-frame smoothing factor equivalent to exponential damping at damp/s"""
    return min(1.0, max(1e-6, 1 - math.exp(-damp * frame_interval)))


class ShapeBlur(BaseEffect):
    restart_keys = ("mouse_damp",)

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        config = instance.config
        canvas = self.create_child(instance, owner, "canvas", bem("shape-blur", "canvas"))
        rect = self.cached_rect(owner)
        uniforms: Dict[str, Any] = {}

        def sync_shape():
            for key in SHAPE_KEYS:
                uniforms[key] = instance.config[key]
            uniforms["pixel_ratio"] = instance.config["pixel_ratio"]

        def sync_resolution():
            box = rect.get()
            if box is None:
                return
            ratio = instance.config["pixel_ratio"]
            uniforms["resolution"] = (box.width * ratio, box.height * ratio)
            canvas.set_attribute("width", int(box.width * ratio))
            canvas.set_attribute("height", int(box.height * ratio))

        def on_frame(session: SamplingSession, _dt: float):
            mouse = session.current
            ratio = instance.config["pixel_ratio"]
            uniforms["mouse"] = (mouse.x * ratio, mouse.y * ratio)
            canvas.set_attribute("data-mouse-x", f"{mouse.x:.2f}")
            canvas.set_attribute("data-mouse-y", f"{mouse.y:.2f}")

        session = self.session(
            instance,
            SamplingProfile(
                smoothing_factor=damp_factor(config["mouse_damp"], self.setting("frame_interval", 1 / 60)),
                settle_epsilon=self.setting("settle_epsilon", 0.05),
                release_when_settled=True,
            ),
            SamplingCallbacks(on_frame=on_frame),
        )

        def on_move(event: DomEvent):
            box = rect.get()
            if box is None or event.point is None:
                return
            session.feed(box.local(event.point))

        def on_resize(_event: DomEvent):
            rect.invalidate()
            sync_resolution()

        self.listen(instance, self.services.document, "pointermove", on_move)
        self.listen(instance, self.services.document, "resize", on_resize)

        sync_shape()
        sync_resolution()
        instance.runtime["canvas"] = canvas
        instance.runtime["uniforms"] = uniforms
        instance.runtime["sync_shape"] = sync_shape
        instance.runtime["session"] = session

    def on_update(self, instance: Instance, previous) -> None:
        super().on_update(instance, previous)
        sync_shape = instance.runtime.get("sync_shape")
        if sync_shape is not None:
            sync_shape()

    def teardown(self, instance: Instance) -> None:
        for key in ("canvas", "uniforms", "sync_shape"):
            instance.runtime.pop(key, None)
