from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

from models.enums import LifecyclePhase
from models.events.base import Event
from models.events.sources import EventSource
from models.events.types import EventType

if TYPE_CHECKING:
    from host.element import Element


PHASE_EVENT_TYPES = {
    LifecyclePhase.INIT: EventType.EFFECT_INIT,
    LifecyclePhase.UPDATE: EventType.EFFECT_UPDATE,
    LifecyclePhase.DESTROY: EventType.EFFECT_DESTROY,
    LifecyclePhase.START: EventType.SAMPLING_STARTED,
    LifecyclePhase.STOP: EventType.SAMPLING_STOPPED,
}


class LifecycleEvent(Event):
    """
    Instance lifecycle notification.

    Dispatched on the owning element as `{event_prefix}-{phase}` and published
    to page-level subscribers of the event bus.
    """

    def __init__(
        self,
        phase: LifecyclePhase,
        effect: str,
        element: "Element",
        event_name: str,
        detail: Optional[Dict[str, Any]] = None,
    ):
        source = (
            EventSource.SAMPLING_LOOP
            if phase in (LifecyclePhase.START, LifecyclePhase.STOP)
            else EventSource.EFFECT_RUNTIME
        )
        super().__init__(type=PHASE_EVENT_TYPES[phase], source=source)
        self.phase = phase
        self.effect = effect
        self.element = element
        self.event_name = event_name
        self.detail = detail

    def dom_detail(self) -> Optional[Dict[str, Any]]:
        """Detail object handed to DOM listeners (None for destroy)"""
        if self.phase == LifecyclePhase.DESTROY:
            return None
        payload = {
            "phase": self.phase.value,
            "component": self.effect,
            "timestamp": self.timestamp,
        }
        if self.detail:
            payload.update(self.detail)
        return payload


class RuntimeReadyEvent(Event):
    """Published once the engine has scanned the document"""

    def __init__(self, components: list, instance_count: int):
        super().__init__(type=EventType.RUNTIME_READY, source=EventSource.ENGINE)
        self.components = components
        self.instance_count = instance_count
