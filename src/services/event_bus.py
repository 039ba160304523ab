"""
Lifecycle Event Bus - structured init/update/destroy notifications

Two audiences:
- the owning element: a bubbling, non-cancelable DOM event named
  `{event_prefix}-{phase}` (e.g. `wb-text-cursor-init`)
- page-level subscribers: subscribe(event_type, handler, priority, filter_fn)
  with a middleware pipeline in front
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from host.element import DomEvent, Element
from models.enums import LifecyclePhase
from models.events import Event, EventType, LifecycleEvent
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class LifecycleEventBus:
    """
    Synchronous event bus for lifecycle notifications

    Features:
    - DOM dispatch on the owning element (bubbles, cancelable=False)
    - Priority-based handler execution (high priority first)
    - Per-handler filtering
    - Middleware pipeline (modify or block before subscribers see it)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = LifecycleEventBus()
        bus.subscribe(
            EventType.EFFECT_INIT,
            on_init,
            priority=10,
            filter_fn=lambda e: e.effect == "text-cursor"
        )
        bus.emit(element, LifecyclePhase.INIT, "text-cursor", "wb-text-cursor", {"config": cfg})
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._middleware: List[Callable[[Event], Optional[Event]]] = []
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call with the event
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        handlers = self._handlers.setdefault(event_type, [])
        handlers.append(EventHandler(handler, priority, filter_fn))
        handlers.sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]) -> bool:
        handlers = self._handlers.get(event_type, [])
        for entry in handlers:
            if entry.handler == handler:
                handlers.remove(entry)
                return True
        return False

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to the publish pipeline

        Middleware returns the (possibly modified) event, or None to block it.
        Runs in registration order. Blocking only affects bus subscribers;
        the DOM event on the element is always dispatched.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    def publish(self, event: Event) -> None:
        """
        Publish event to subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority, honouring filters
        4. Catch and log handler exceptions
        """
        for middleware in self._middleware:
            processed = middleware(event)
            if processed is None:
                return
            event = processed

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        for entry in list(self._handlers.get(event.type, [])):
            if entry.filter_fn and not entry.filter_fn(event):
                continue
            try:
                entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(entry.handler, '__name__', 'handler')} for {event.type.name}",
                    error=str(e)
                )

    def emit(
        self,
        element: Element,
        phase: LifecyclePhase,
        effect: str,
        event_prefix: str,
        detail: Optional[Dict[str, Any]] = None,
    ) -> LifecycleEvent:
        """Dispatch `{event_prefix}-{phase}` on element, then publish"""
        event_name = f"{event_prefix}-{phase.value}"
        event = LifecycleEvent(phase, effect, element, event_name, detail)

        element.dispatch_event(DomEvent(event_name, detail=event.dom_detail(), bubbles=True, cancelable=False))
        log.debug("Lifecycle event", event_name=event_name)

        self.publish(event)
        return event

    def add_lifecycle_listener(
        self,
        element: Element,
        phase: LifecyclePhase,
        event_prefix: str,
        callback: Callable[[DomEvent], None],
    ) -> Callable[[], None]:
        """Listen for one lifecycle event on element; returns the remover"""
        event_name = f"{event_prefix}-{phase.value}"
        element.add_event_listener(event_name, callback)
        return lambda: element.remove_event_listener(event_name, callback)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()
