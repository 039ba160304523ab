"""
Middleware for LifecycleEventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from typing import Callable, Iterable, Optional

from models.events import Event, LifecycleEvent
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Middleware = Callable[[Event], Optional[Event]]


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source is not None else "-"

    if isinstance(event, LifecycleEvent):
        data_str = f"{event.event_name} on {event.element!r}"
    else:
        data_str = str(event.to_data())

    log.debug(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event


def effect_filter_middleware(effects: Iterable[str]) -> Middleware:
    """
    Only let lifecycle events of the named effects through to subscribers.
    Other events pass unchanged; DOM dispatch is not affected.

    Usage:
        event_bus.add_middleware(effect_filter_middleware(["text-cursor"]))
    """
    allowed = set(effects)

    def middleware(event: Event) -> Optional[Event]:
        if isinstance(event, LifecycleEvent) and event.effect not in allowed:
            return None
        return event

    return middleware
