"""
Event system for the effects runtime

Lifecycle events are dispatched as DOM-style events on the owning element and
published to page-level subscribers of the LifecycleEventBus.
"""

from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource
from models.events.lifecycle_events import LifecycleEvent, RuntimeReadyEvent, PHASE_EVENT_TYPES

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "LifecycleEvent",
    "RuntimeReadyEvent",
    "PHASE_EVENT_TYPES",
]
