"""
Text Cursor - a trail of text glyphs following the pointer

Pointer moves inside the element feed a distance gate spaced at `spacing`;
fast moves are subdivided. The trail holds at most `max_points` glyphs, the
oldest fade out over `exit_duration`. While the pointer rests, one glyph is
retired every `removal_interval` ms.
"""

import random
from typing import Any, Dict

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from engine.trail_buffer import TrailUnit
from host.element import DomEvent
from managers.class_manager import bem
from models.geometry import Point
from models.instance import Instance
from utils.math_helpers import fold_half_turn, pointer_angle
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)


class TextCursor(BaseEffect):
    restart_keys = ("spacing", "max_points", "exit_duration", "removal_interval")

    def setup(self, instance: Instance) -> None:
        config = instance.config
        owner = instance.owner

        container = self.create_child(instance, owner, "div", bem("text-cursor", "container"))
        rect = self.cached_rect(owner)
        state: Dict[str, Any] = {"angle": 0.0, "last_move": self.services.clock.now(), "ids": 0}

        def on_emit(session: SamplingSession, point: Point):
            config = instance.config
            state["ids"] += 1
            item = self.services.document.create_element("div")
            item.class_list.add(bem("text-cursor", "item"))
            item.text_content = config["text"]
            item.set_attribute("data-id", state["ids"])
            angle = state["angle"] if config["follow_mouse_direction"] else 0.0
            item.style.set_property("left", f"{point.x}px")
            item.style.set_property("top", f"{point.y}px")
            item.style.set_property("transform", f"translate(-50%, -50%) rotate({angle}deg)")
            item.style.set_property("font-size", config["font_size"])
            item.style.set_property("color", config["color"])
            # fade-in length
            item.style.set_property("animation-duration", f"{config['delay']}s")
            if config["random_float"]:
                item.style.set_property("--wb-float-x", f"{random.uniform(-10, 10):.1f}px")
                item.style.set_property("--wb-float-y", f"{random.uniform(-10, 10):.1f}px")
            container.append_child(item)
            return item

        def on_exit(unit: TrailUnit):
            config = instance.config
            if unit.handle is not None:
                unit.handle.class_list.add(bem("text-cursor", "item", "exiting"))
                unit.handle.style.set_property("opacity", "0")
                unit.handle.style.set_property("transition", f"opacity {config['exit_duration']}s, transform {config['exit_duration']}s")

        session = self.session(
            instance,
            SamplingProfile(
                threshold=config["spacing"],
                subdivide=True,
                max_points=int(config["max_points"]),
                exit_duration=config["exit_duration"],
                use_frames=False,
            ),
            SamplingCallbacks(on_emit=on_emit, on_exit=on_exit),
        )

        def on_move(event: DomEvent):
            box = rect.get()
            if box is None or event.point is None:
                return
            local = box.local(event.point)
            state["last_move"] = self.services.clock.now()
            anchor = session.gate.last_emitted
            if anchor is not None:
                raw = pointer_angle(local.x - anchor.x, local.y - anchor.y)
                if raw is not None:
                    state["angle"] = fold_half_turn(raw)
            session.feed(local)

        def on_resize(_event: DomEvent):
            rect.invalidate()

        def retire_idle():
            if self.services.clock.now() - state["last_move"] <= self.setting("idle_after", 0.1):
                return
            if session.trail.evict_oldest() is not None and len(session.trail) == 0:
                session.gate.reset()

        self.listen(instance, owner, "pointermove", on_move)
        self.listen(instance, self.services.document, "resize", on_resize)
        self.every(instance, config["removal_interval"] / 1000.0, retire_idle)

        instance.runtime["container"] = container
        instance.runtime["session"] = session
        log.debug("Text cursor ready", spacing=config["spacing"], max_points=config["max_points"])
