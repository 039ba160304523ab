from __future__ import annotations

import time
from typing import Any, Dict, Optional

from models.events.types import EventType
from models.events.sources import EventSource


class Event:
    """
    Base of everything published on the LifecycleEventBus

    Subclasses add their payload as plain attributes; to_data() returns that
    payload without the type/source/timestamp envelope.
    """

    ENVELOPE = ("type", "source", "timestamp")

    def __init__(self, *, type: EventType, source: Optional[EventSource]):
        self.type = type
        self.source = source
        self.timestamp = time.time()

    def to_data(self) -> Dict[str, Any]:
        return {k: v for k, v in vars(self).items() if k not in self.ENVELOPE}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type.name})"
