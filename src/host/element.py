"""
Element model

A small, synchronous stand-in for the DOM pieces the runtime touches:
attributes, an ordered class list, inline style properties, a child tree,
bounding boxes, and bubbling events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from host.selectors import compile_selector
from models.geometry import Point, Rect
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from host.document import Document

log = get_logger().for_category(LogCategory.HOST)

Listener = Callable[["DomEvent"], None]


@dataclass
class DomEvent:
    """Event dispatched through an EventTarget tree"""
    type: str
    detail: Any = None
    bubbles: bool = True
    cancelable: bool = False
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    target: Optional["EventTarget"] = field(default=None, repr=False)
    current_target: Optional["EventTarget"] = field(default=None, repr=False)
    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True

    @property
    def point(self) -> Optional[Point]:
        if self.client_x is None or self.client_y is None:
            return None
        return Point(self.client_x, self.client_y)


class EventTarget:
    """Listener registry with DOM-like dispatch and bubbling"""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        """Register listener; registering the same callable twice is a no-op"""
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)
            if not listeners:
                del self._listeners[event_type]

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    def _event_parent(self) -> Optional["EventTarget"]:
        return None

    def _invoke(self, event: DomEvent) -> None:
        event.current_target = self
        for listener in list(self._listeners.get(event.type, [])):
            try:
                listener(event)
            except Exception as e:
                log.error(
                    "Event listener failed",
                    event=event.type,
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e),
                )

    def dispatch_event(self, event: DomEvent) -> bool:
        """
        Dispatch event at this target, then bubble through parents.

        Returns:
            True (events are never cancelable here)
        """
        event.target = self
        node: Optional[EventTarget] = self
        while node is not None:
            node._invoke(event)
            if not event.bubbles or event.propagation_stopped:
                break
            node = node._event_parent()
        event.current_target = None
        return True


class ClassList:
    """Ordered, duplicate-free class token list"""

    def __init__(self, owner: "Element"):
        self._owner = owner
        self._tokens: List[str] = []

    def add(self, *names: str) -> None:
        for name in names:
            if name and name not in self._tokens:
                self._tokens.append(name)

    def remove(self, *names: str) -> None:
        for name in names:
            if name in self._tokens:
                self._tokens.remove(name)

    def contains(self, name: str) -> bool:
        return name in self._tokens

    def toggle(self, name: str, force: Optional[bool] = None) -> bool:
        present = self.contains(name)
        want = (not present) if force is None else force
        if want:
            self.add(name)
        else:
            self.remove(name)
        return want

    @property
    def value(self) -> str:
        return " ".join(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __repr__(self) -> str:
        return f"ClassList({self.value!r})"


class Style:
    """Inline style declarations, keyed by CSS property name"""

    def __init__(self):
        self._props: Dict[str, str] = {}

    def set_property(self, name: str, value: Any) -> None:
        self._props[name] = str(value)

    def get_property(self, name: str) -> str:
        return self._props.get(name, "")

    def remove_property(self, name: str) -> str:
        return self._props.pop(name, "")

    def items(self):
        return list(self._props.items())

    def __contains__(self, name: str) -> bool:
        return name in self._props

    def __len__(self) -> int:
        return len(self._props)


class Element(EventTarget):
    """
    Markup element

    Compared and hashed by identity, so it can key registries the way a DOM
    node keys a WeakMap.
    """

    def __init__(
        self,
        tag_name: str = "div",
        attributes: Optional[Dict[str, str]] = None,
        document: Optional["Document"] = None,
    ):
        super().__init__()
        self.tag_name = tag_name.lower()
        self.owner_document = document
        self._attributes: Dict[str, str] = {}
        self.class_list = ClassList(self)
        self.style = Style()
        self.children: List[Element] = []
        self.parent: Optional[Element] = None
        self._text = ""
        self._rect = Rect()
        self.layout_version = 0
        for name, value in (attributes or {}).items():
            self.set_attribute(name, value)

    # === Attributes ===

    def get_attribute(self, name: str) -> Optional[str]:
        if name == "class":
            return self.class_list.value if len(self.class_list) else None
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        if name == "class":
            for token in list(self.class_list):
                self.class_list.remove(token)
            self.class_list.add(*str(value).split())
            return
        self._attributes[name] = str(value)

    def has_attribute(self, name: str) -> bool:
        if name == "class":
            return len(self.class_list) > 0
        return name in self._attributes

    def remove_attribute(self, name: str) -> None:
        self._attributes.pop(name, None)

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self._attributes)

    @property
    def id(self) -> Optional[str]:
        return self._attributes.get("id")

    # === Tree ===

    def append_child(self, child: Element) -> Element:
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        if child.owner_document is None:
            child.owner_document = self.owner_document
        self.children.append(child)
        child._bump_layout()
        return child

    def remove_child(self, child: Element) -> Element:
        if child in self.children:
            self.children.remove(child)
            child.parent = None
            child._bump_layout()
        return child

    def remove(self) -> None:
        """Detach from parent (no-op when already detached)"""
        if self.parent is not None:
            self.parent.remove_child(self)

    def replace_children(self, *nodes: Element) -> None:
        for child in list(self.children):
            self.remove_child(child)
        for node in nodes:
            self.append_child(node)

    @property
    def text_content(self) -> str:
        if self.children:
            return self._text + "".join(c.text_content for c in self.children)
        return self._text

    @text_content.setter
    def text_content(self, value: str) -> None:
        for child in list(self.children):
            self.remove_child(child)
        self._text = value

    @property
    def own_text(self) -> str:
        """Text of this node only, without descendants"""
        return self._text

    @property
    def is_connected(self) -> bool:
        node: Optional[Element] = self
        while node.parent is not None:
            node = node.parent
        doc = self.owner_document
        return doc is not None and node is doc.body

    def iter_descendants(self) -> Iterator[Element]:
        for child in list(self.children):
            yield child
            yield from child.iter_descendants()

    def matches(self, selector: str) -> bool:
        return compile_selector(selector)(self)

    def query_selector_all(self, selector: str) -> List[Element]:
        """Descendants matching selector, in document order"""
        predicate = compile_selector(selector)
        return [el for el in self.iter_descendants() if predicate(el)]

    def query_selector(self, selector: str) -> Optional[Element]:
        found = self.query_selector_all(selector)
        return found[0] if found else None

    def _event_parent(self) -> Optional[EventTarget]:
        if self.parent is not None:
            return self.parent
        doc = self.owner_document
        if doc is not None and self is doc.body:
            return doc
        return None

    # === Geometry ===

    def _bump_layout(self) -> None:
        self.layout_version += 1
        for child in self.children:
            child._bump_layout()

    def set_rect(self, rect: Rect) -> None:
        """Host-side layout update (resize, scroll, reflow)"""
        self._rect = rect
        self._bump_layout()

    def get_bounding_client_rect(self) -> Rect:
        return self._rect

    def __repr__(self) -> str:
        classes = f" class={self.class_list.value!r}" if len(self.class_list) else ""
        return f"<{self.tag_name}{classes}>"
