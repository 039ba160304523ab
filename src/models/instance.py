"""Per-element runtime record"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, TYPE_CHECKING

from models.enums import LifecycleState
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from host.element import Element

log = get_logger().for_category(LogCategory.REGISTRY)


@dataclass(eq=False)
class Instance:
    """
    Live state of one effect attached to one element.

    - owner: element key (identity)
    - config: resolved configuration
    - added_classes: classes this runtime added, in insertion order
    - runtime: effect-specific mutable state (trail buffers, accumulators)
    - disposers: callbacks releasing listeners, frame requests and timers
    """
    owner: "Element"
    effect_name: str
    config: Dict[str, Any]
    lifecycle_state: LifecycleState = LifecycleState.UNINITIALIZED
    added_classes: List[str] = field(default_factory=list)
    runtime: Dict[str, Any] = field(default_factory=dict)
    unsupported: bool = False
    disposers: List[Callable[[], None]] = field(default_factory=list)

    def add_disposer(self, disposer: Callable[[], None]) -> Callable[[], None]:
        self.disposers.append(disposer)
        return disposer

    def track_class(self, class_name: str) -> None:
        if class_name not in self.added_classes:
            self.added_classes.append(class_name)

    def untrack_class(self, class_name: str) -> None:
        if class_name in self.added_classes:
            self.added_classes.remove(class_name)

    @property
    def is_active(self) -> bool:
        return self.lifecycle_state == LifecycleState.ACTIVE

    def release(self) -> List[BaseException]:
        """
        Run every disposer once, newest first.

        Disposer errors are collected and returned so teardown can report
        them after all other resources were released.
        """
        errors: List[BaseException] = []
        while self.disposers:
            disposer = self.disposers.pop()
            try:
                disposer()
            except Exception as e:
                log.error("Disposer failed", effect=self.effect_name, error=str(e))
                errors.append(e)
        return errors
