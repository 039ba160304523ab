"""
Variable Proximity - letters get bolder as the pointer gets closer

Text is split into one span per letter. Every frame the eased pointer
position is compared with each letter centre and weight/optical size are
interpolated between from_* and to_* using the configured falloff curve.
"""

import math
from typing import List

from effects.base import BaseEffect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent, Element
from managers.class_manager import bem
from models.enums import FalloffMode
from models.geometry import Point, Rect
from models.instance import Instance
from utils.math_helpers import clamp
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)


def falloff(distance: float, radius: float, mode: FalloffMode) -> float:
    """Proximity strength in [0, 1]; 0 at or beyond radius"""
    if radius <= 0 or distance >= radius:
        return 0.0
    norm = clamp(1 - distance / radius, 0.0, 1.0)
    if mode == FalloffMode.EXPONENTIAL:
        return norm ** 2
    if mode == FalloffMode.GAUSSIAN:
        return math.exp(-((distance / (radius / 2)) ** 2) / 2)
    return norm


def font_variation(weight: float, size: float) -> str:
    return f"'wght' {round(weight)}, 'opsz' {round(size)}"


def letter_centers(letters: List[Element], box: Rect) -> List[Point]:
    """Laid-out letters use their own box; others share the line evenly"""
    slot = box.width / len(letters) if letters else 0.0
    centers = []
    for index, letter in enumerate(letters):
        own = letter.get_bounding_client_rect()
        if own.width > 0 or own.height > 0:
            centers.append(own.center)
        else:
            centers.append(Point(box.left + slot * (index + 0.5), box.top + box.height / 2))
    return centers


class VariableProximity(BaseEffect):

    def setup(self, instance: Instance) -> None:
        owner = instance.owner
        instance.runtime["original_text"] = owner.own_text
        instance.runtime["original_children"] = list(owner.children)

        text = owner.text_content
        owner.text_content = ""
        letters: List[Element] = []
        for word_index, word in enumerate(text.split(" ")):
            if word_index:
                space = self.services.document.create_element("span")
                space.class_list.add(bem("variable-proximity", "space"))
                space.text_content = " "
                owner.append_child(space)
            word_el = self.services.document.create_element("span")
            word_el.class_list.add(bem("variable-proximity", "word"))
            for char in word:
                letter = self.services.document.create_element("span")
                letter.class_list.add(bem("variable-proximity", "letter"))
                letter.text_content = char
                word_el.append_child(letter)
                letters.append(letter)
            owner.append_child(word_el)

        rect = self.cached_rect(owner)
        self._rest(letters, instance.config)

        def on_frame(session: SamplingSession, _dt: float):
            config = instance.config
            box = rect.get()
            if box is None:
                return
            mode = FalloffMode(config["falloff"])
            pointer = session.current
            for letter, center in zip(letters, letter_centers(letters, box)):
                strength = falloff(pointer.distance_to(center), config["radius"], mode)
                weight = config["from_weight"] + (config["to_weight"] - config["from_weight"]) * strength
                size = config["from_size"] + (config["to_size"] - config["from_size"]) * strength
                letter.style.set_property("font-variation-settings", font_variation(weight, size))

        session = self.session(
            instance,
            SamplingProfile(
                smoothing_factor=self.setting("smoothing", 0.25),
                settle_epsilon=self.setting("settle_epsilon", 0.1),
                release_when_settled=True,
            ),
            SamplingCallbacks(on_frame=on_frame),
        )

        def on_move(event: DomEvent):
            if event.point is not None:
                session.feed(event.point)

        def on_resize(_event: DomEvent):
            rect.invalidate()

        self.listen(instance, self.services.document, "pointermove", on_move)
        self.listen(instance, self.services.document, "resize", on_resize)

        instance.runtime["letters"] = letters
        instance.runtime["session"] = session
        log.debug("Variable proximity split", letters=len(letters))

    def _rest(self, letters: List[Element], config) -> None:
        resting = font_variation(config["from_weight"], config["from_size"])
        for letter in letters:
            letter.style.set_property("font-variation-settings", resting)

    def on_update(self, instance: Instance, previous) -> None:
        session = instance.runtime.get("session")
        if session is not None and session.smoothed.initialized:
            session.start()
        else:
            self._rest(instance.runtime.get("letters", []), instance.config)

    def teardown(self, instance: Instance) -> None:
        owner = instance.owner
        owner.text_content = instance.runtime.pop("original_text", "")
        for child in instance.runtime.pop("original_children", []):
            owner.append_child(child)
        instance.runtime.pop("letters", None)
