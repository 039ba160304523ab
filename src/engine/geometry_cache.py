"""Cached bounding boxes that follow layout changes"""

from typing import Optional

from host.element import Element
from models.geometry import Rect


class CachedRect:
    """
    Caches element.get_bounding_client_rect()

    Recomputed whenever the element's layout_version moved (resize, reflow,
    attach, detach) or invalidate() was called. Detached elements yield None
    rather than a stale box.
    """

    def __init__(self, element: Element):
        self.element = element
        self._rect: Optional[Rect] = None
        self._version = -1
        self.recomputes = 0

    def get(self) -> Optional[Rect]:
        if not self.element.is_connected:
            self._rect = None
            self._version = -1
            return None
        if self._rect is None or self._version != self.element.layout_version:
            self._rect = self.element.get_bounding_client_rect()
            self._version = self.element.layout_version
            self.recomputes += 1
        return self._rect

    def invalidate(self) -> None:
        self._rect = None
