"""
Ripple Button - material-style ripple from the click point

Each click appends a circular span sized max(width, height), centred on
the click, and removes it after `duration` ms. Ripples live in a bounded
trail so a click storm never keeps more than `max_ripples` spans around.
"""

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent
from managers.class_manager import bem
from models.geometry import Point
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

RIPPLE_CLASS = bem("ripple-button", "ripple")


class RippleButton(BaseEffect):
    restart_keys = ("duration",)

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        default_color = self.descriptor.defaults.get("color")
        clicked = f"{self.prefix}--clicked"

        if owner.tag_name == "a":
            self.override_style(instance, owner, "display", "inline-block")
            self.override_style(instance, owner, "overflow", "hidden")

        def on_emit(session: SamplingSession, point: Point):
            config = instance.config
            box = owner.get_bounding_client_rect()
            size = max(box.width, box.height)
            ripple = self.services.document.create_element("span")
            ripple.class_list.add(RIPPLE_CLASS)
            ripple.style.set_property("width", f"{size}px")
            ripple.style.set_property("height", f"{size}px")
            ripple.style.set_property("left", f"{point.x - size / 2}px")
            ripple.style.set_property("top", f"{point.y - size / 2}px")
            ripple.style.set_property("animation-duration", f"{config['duration']}ms")
            if config["color"] != default_color:
                ripple.style.set_property("--wb-ripple-color", config["color"])
            owner.append_child(ripple)
            return ripple

        session = self.session(
            instance,
            SamplingProfile(
                max_points=int(self.setting("max_ripples", 8)),
                unit_lifetime=instance.config["duration"] / 1000.0,
                use_frames=False,
            ),
            SamplingCallbacks(on_emit=on_emit),
        )

        def on_click(event: DomEvent):
            config = instance.config
            if config["disabled"] or event.point is None:
                return
            local = owner.get_bounding_client_rect().local(event.point)
            session.emit(local)
            if config["scale_effect"]:
                owner.style.set_property("--wb-scale-amount", str(config["scale_amount"]))
                self.services.class_manager.apply(owner, clicked, instance)
                self.later(
                    instance,
                    self.setting("press_duration", 0.1),
                    lambda: self.services.class_manager.discard(owner, clicked, instance),
                )

        self.listen(instance, owner, "click", on_click)
        instance.runtime["session"] = session

    def teardown(self, instance: Instance) -> None:
        instance.owner.style.remove_property("--wb-scale-amount")
