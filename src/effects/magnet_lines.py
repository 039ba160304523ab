"""
Magnet Lines - a grid of short lines that point at the pointer

Each line keeps its own AngleAccumulator so its rotation stays continuous
while the pointer circles around it.
"""

from typing import List

from effects.base import BaseEffect
from engine.angle_accumulator import AngleAccumulator
from host.element import DomEvent, Element
from managers.class_manager import bem
from models.geometry import Point, Rect
from models.instance import Instance
from utils.math_helpers import pointer_angle
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)


def grid_centers(box: Rect, rows: int, columns: int) -> List[Point]:
    """Centres of a rows x columns grid laid over box, row-major"""
    cell_w = box.width / columns
    cell_h = box.height / rows
    return [
        Point(box.left + cell_w * (col + 0.5), box.top + cell_h * (row + 0.5))
        for row in range(rows)
        for col in range(columns)
    ]


class MagnetLines(BaseEffect):
    restart_keys = ("rows", "columns")

    def setup(self, instance: Instance) -> None:
        config = instance.config
        owner = instance.owner
        rows, columns = int(config["rows"]), int(config["columns"])

        instance.runtime["original_children"] = list(owner.children)
        self.override_style(instance, owner, "grid-template-columns", f"repeat({columns}, 1fr)")
        self.override_style(instance, owner, "grid-template-rows", f"repeat({rows}, 1fr)")

        lines: List[Element] = []
        for _ in range(rows * columns):
            line = self.services.document.create_element("span")
            line.class_list.add(bem("magnet-lines", "line"))
            line.style.set_property("--rotate", f"{config['base_angle']}deg")
            line.style.set_property("background-color", config["line_color"])
            line.style.set_property("width", config["line_width"])
            line.style.set_property("height", config["line_height"])
            lines.append(line)
        owner.replace_children(*lines)

        accumulators = [AngleAccumulator() for _ in lines]
        rect = self.cached_rect(owner)

        def on_move(event: DomEvent):
            box = rect.get()
            if box is None or event.point is None:
                return
            for line, acc, center in zip(lines, accumulators, grid_centers(box, rows, columns)):
                angle = pointer_angle(event.point.x - center.x, event.point.y - center.y)
                if angle is None:
                    continue
                line.style.set_property("--rotate", f"{acc.update(angle):.3f}deg")

        def on_resize(_event: DomEvent):
            rect.invalidate()

        self.listen(instance, self.services.document, "pointermove", on_move)
        self.listen(instance, self.services.document, "resize", on_resize)

        instance.runtime["lines"] = lines
        instance.runtime["accumulators"] = accumulators
        log.debug("Magnet lines built", rows=rows, columns=columns)

    def teardown(self, instance: Instance) -> None:
        owner = instance.owner
        owner.replace_children(*instance.runtime.pop("original_children", []))
        instance.runtime.pop("lines", None)
        instance.runtime.pop("accumulators", None)
