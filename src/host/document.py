"""Document model: body tree, style sheets, host capabilities"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from host.element import Element, EventTarget
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STYLE)


@dataclass(frozen=True)
class StyleSheet:
    """Injected <style> block"""
    id: str
    css: str


class Document(EventTarget):
    """
    Page document

    capabilities: host features effects may require (e.g. "webgl")
    """

    def __init__(self, capabilities: Optional[Iterable[str]] = None):
        super().__init__()
        self.body = Element("body", document=self)
        self.capabilities = set(capabilities or [])
        self._style_sheets: Dict[str, StyleSheet] = {}

    def create_element(self, tag_name: str = "div", **attributes: str) -> Element:
        """Create a detached element owned by this document"""
        return Element(tag_name, attributes={k.replace("_", "-"): v for k, v in attributes.items()}, document=self)

    def query_selector_all(self, selector: str) -> List[Element]:
        predicate_root = [self.body] if self.body.matches(selector) else []
        return predicate_root + self.body.query_selector_all(selector)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for el in self.body.iter_descendants():
            if el.get_attribute("id") == element_id:
                return el
        return None

    # === Style sheets ===

    def ensure_style_sheet(self, sheet_id: str, css: str) -> bool:
        """
        Inject css once per id.

        Returns:
            True if the sheet was injected now, False if it already existed
        """
        if sheet_id in self._style_sheets:
            return False
        self._style_sheets[sheet_id] = StyleSheet(sheet_id, css)
        log.debug("Style sheet injected", id=sheet_id, size=len(css))
        return True

    def has_style_sheet(self, sheet_id: str) -> bool:
        return sheet_id in self._style_sheets

    @property
    def style_sheets(self) -> List[StyleSheet]:
        return list(self._style_sheets.values())
