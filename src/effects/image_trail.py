"""
Image Trail - images from a fixed pool pop up along the pointer path

The pool is the `.wb-image-trail__item` children of the element. Every
`threshold` px of pointer travel the next image of the pool is shown,
travelling from the eased pointer position to the raw one, and hidden again
after `show_duration + hide_duration`. z-index grows with every image and
restarts at 1 once no image is visible.
"""

from typing import Dict

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent, Element
from host.frame_clock import TimerHandle
from managers.class_manager import bem
from models.geometry import Point
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

ITEM_CLASS = bem("image-trail", "item")
ACTIVE_CLASS = bem("image-trail", "item", "active")


class ImageTrail(BaseEffect):
    restart_keys = ("threshold",)

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        images = owner.query_selector_all(f".{ITEM_CLASS}")
        rect = self.cached_rect(owner)
        hide_timers: Dict[Element, TimerHandle] = {}
        state = {"position": -1}
        show = self.setting("show_duration", 0.4)
        hide = self.setting("hide_duration", 0.4)

        def hide_image(image: Element, session: SamplingSession):
            hide_timers.pop(image, None)
            image.class_list.remove(ACTIVE_CLASS)
            image.style.set_property("opacity", "0")
            session.unit_finished()

        def on_emit(session: SamplingSession, point: Point):
            if not images:
                session.unit_finished()
                return None
            state["position"] = (state["position"] + 1) % len(images)
            image = images[state["position"]]

            pending = hide_timers.pop(image, None)
            if pending is not None and pending.pending:
                pending.cancel()
                session.unit_finished()

            size = image.get_bounding_client_rect()
            start = session.current
            image.class_list.add(ACTIVE_CLASS)
            image.style.set_property("opacity", "1")
            image.style.set_property("z-index", str(session.stacking.next()))
            image.style.set_property("--wb-from-x", f"{start.x - size.width / 2:.2f}px")
            image.style.set_property("--wb-from-y", f"{start.y - size.height / 2:.2f}px")
            image.style.set_property("--wb-to-x", f"{point.x - size.width / 2:.2f}px")
            image.style.set_property("--wb-to-y", f"{point.y - size.height / 2:.2f}px")
            hide_timers[image] = self.later(instance, show + hide, lambda: hide_image(image, session))
            return image

        def on_idle(_session: SamplingSession):
            log.debug("Image trail idle", effect=self.name)

        session = self.session(
            instance,
            SamplingProfile(
                smoothing_factor=self.setting("smoothing", 0.1),
                threshold=instance.config["threshold"],
                subdivide=False,
                release_when_settled=True,
            ),
            SamplingCallbacks(on_emit=on_emit, on_idle=on_idle),
        )

        def on_move(event: DomEvent):
            box = rect.get()
            if box is None or event.point is None:
                return
            session.feed(box.local(event.point))

        def on_resize(_event: DomEvent):
            rect.invalidate()

        self.listen(instance, owner, "pointermove", on_move)
        self.listen(instance, self.services.document, "resize", on_resize)

        instance.runtime["images"] = images
        instance.runtime["session"] = session
        log.debug("Image trail ready", images=len(images), threshold=instance.config["threshold"])

    def teardown(self, instance: Instance) -> None:
        for image in instance.runtime.pop("images", []):
            image.class_list.remove(ACTIVE_CLASS)
            for prop in ("opacity", "z-index", "--wb-from-x", "--wb-from-y", "--wb-to-x", "--wb-to-y"):
                image.style.remove_property(prop)
