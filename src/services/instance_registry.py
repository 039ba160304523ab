"""
InstanceRegistry - element → instance store

At most one live instance per element. Creation while active is a reported
no-op, removal of an unknown element is a silent no-op, and a failing
teardown never leaves a stuck entry behind.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

from host.element import Element
from models.enums import DiagnosticKind, LifecycleState
from models.errors import TeardownFailure
from models.instance import Instance
from services.diagnostics import Diagnostics
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.REGISTRY)


class InstanceRegistry:
    """
    Keyed store owned by one effect runtime

    Elements key the store by identity, like a DOM WeakMap.
    """

    def __init__(self, name: str, diagnostics: Diagnostics):
        self.name = name
        self.log = log.bind(effect=name)
        self.diagnostics = diagnostics
        self._instances: Dict[int, Instance] = {}

    @staticmethod
    def _key(element: Element) -> int:
        return id(element)

    def create(self, element: Element, factory: Callable[[], Instance]) -> Optional[Instance]:
        """
        Build and store an instance for element.

        Returns:
            The new instance, or None if one already exists or factory failed
        """
        key = self._key(element)
        if key in self._instances:
            self.diagnostics.report(
                DiagnosticKind.LIFECYCLE_VIOLATION,
                "Element already initialized",
                effect=self.name,
                element=repr(element),
            )
            return None

        try:
            instance = factory()
        except Exception as e:
            self.log.error("Instance factory failed", error=str(e))
            return None

        instance.lifecycle_state = LifecycleState.ACTIVE
        self._instances[key] = instance
        self.log.debug("Instance created", count=len(self._instances))
        return instance

    def get(self, element: Element) -> Optional[Instance]:
        return self._instances.get(self._key(element))

    def has(self, element: Element) -> bool:
        return self._key(element) in self._instances

    def remove(self, element: Element, teardown: Callable[[Instance], None]) -> bool:
        """
        Run teardown exactly once and delete the entry, even if teardown raises.

        Returns:
            True if an instance was removed, False for an unknown element
        """
        key = self._key(element)
        instance = self._instances.get(key)
        if instance is None:
            return False

        try:
            teardown(instance)
        except Exception as e:
            failure = TeardownFailure("Teardown failed", cause=e, effect=self.name, error=str(e))
            self.diagnostics.report_error(failure)
        finally:
            self._instances.pop(key, None)
            instance.lifecycle_state = LifecycleState.DESTROYED

        self.log.debug("Instance removed", count=len(self._instances))
        return True

    def for_each(self, fn: Callable[[Element, Instance], None]) -> None:
        """Iterate a snapshot, so fn may remove entries"""
        for instance in list(self._instances.values()):
            fn(instance.owner, instance)

    def elements(self) -> List[Element]:
        return [i.owner for i in self._instances.values()]

    def instances(self) -> List[Instance]:
        return list(self._instances.values())

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, element: Element) -> bool:
        return self.has(element)

    def __iter__(self) -> Iterator[Instance]:
        return iter(self.instances())
