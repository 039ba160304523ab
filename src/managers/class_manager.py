"""
Class Lifecycle Manager

Applies and removes CSS classes on elements while remembering exactly which
classes an instance added, so teardown never strips classes owned by page
code. Also owns the mutually exclusive animating/completed/paused state
classes.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from host.element import Element
from models.enums import EffectState
from models.instance import Instance
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CLASSES)

ClassNames = Union[str, Iterable[str]]


def _as_list(class_names: Optional[ClassNames]) -> List[str]:
    if class_names is None:
        return []
    if isinstance(class_names, str):
        return class_names.split()
    return [c for c in class_names if c]


def state_class(prefix: str, state: EffectState) -> str:
    return f"{prefix}-{state.value}"


def bem(component: str, element: Optional[str] = None, modifier: Optional[str] = None) -> str:
    """
    Build a BEM class name in the runtime's namespace

    Example:
        bem("text-cursor", "item")            # "wb-text-cursor__item"
        bem("ripple-button", None, "active")  # "wb-ripple-button--active"
    """
    name = f"wb-{component}"
    if element:
        name += f"__{element}"
    if modifier:
        name += f"--{modifier}"
    return name


@dataclass(frozen=True)
class ComponentClasses:
    """Standard class names of one component"""
    parent: str
    animating: str
    completed: str
    paused: str
    unsupported: str

    @classmethod
    def for_prefix(cls, prefix: str) -> "ComponentClasses":
        return cls(
            parent=prefix,
            animating=state_class(prefix, EffectState.ANIMATING),
            completed=state_class(prefix, EffectState.COMPLETED),
            paused=state_class(prefix, EffectState.PAUSED),
            unsupported=f"{prefix}-unsupported",
        )

    @classmethod
    def for_component(cls, name: str) -> "ComponentClasses":
        return cls.for_prefix(f"wb-{name}")

    def all(self) -> List[str]:
        return [self.parent, self.animating, self.completed, self.paused, self.unsupported]


class ClassLifecycleManager:
    """
    Tracks class ownership per instance

    Invariant: instance.added_classes only holds classes this manager added
    that are still on the element.
    """

    def apply(self, element: Element, class_names: ClassNames, instance: Optional[Instance] = None) -> None:
        """Add classes and record them on the instance"""
        names = _as_list(class_names)
        if not names:
            return
        element.class_list.add(*names)
        if instance is not None:
            for name in names:
                instance.track_class(name)
        log.debug("Classes applied", classes=" ".join(names))

    def remove(
        self,
        element: Element,
        fallback_class_names: Optional[ClassNames] = None,
        instance: Optional[Instance] = None,
    ) -> None:
        """Remove tracked classes, then the fallback list"""
        tracked = list(instance.added_classes) if instance is not None else []
        fallback = _as_list(fallback_class_names)
        element.class_list.remove(*tracked)
        element.class_list.remove(*fallback)
        if instance is not None:
            instance.added_classes.clear()
        log.debug("Classes removed", tracked=len(tracked), fallback=len(fallback))

    def discard(self, element: Element, class_names: ClassNames, instance: Optional[Instance] = None) -> None:
        """Remove specific classes and stop tracking them"""
        names = _as_list(class_names)
        element.class_list.remove(*names)
        if instance is not None:
            for name in names:
                instance.untrack_class(name)

    def update(
        self,
        element: Element,
        old_class_names: ClassNames,
        new_class_names: ClassNames,
        instance: Optional[Instance] = None,
    ) -> None:
        self.discard(element, old_class_names, instance)
        self.apply(element, new_class_names, instance)

    def set_exclusive_state(
        self,
        element: Element,
        state: EffectState,
        prefix: str,
        instance: Optional[Instance] = None,
    ) -> None:
        """Leave exactly one of {prefix}-animating/-completed/-paused on element"""
        self.discard(element, [state_class(prefix, s) for s in EffectState], instance)
        self.apply(element, state_class(prefix, state), instance)

    def current_state(self, element: Element, prefix: str) -> Optional[EffectState]:
        for state in EffectState:
            if element.class_list.contains(state_class(prefix, state)):
                return state
        return None

    def is_in_state(self, element: Element, state: EffectState, prefix: str) -> bool:
        return element.class_list.contains(state_class(prefix, state))

    @staticmethod
    def has_any_class(element: Element, class_names: ClassNames) -> bool:
        return any(element.class_list.contains(c) for c in _as_list(class_names))

    @staticmethod
    def get_added_classes(instance: Optional[Instance]) -> List[str]:
        return list(instance.added_classes) if instance is not None else []
