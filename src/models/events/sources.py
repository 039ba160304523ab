from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for runtime events"""
    EFFECT_RUNTIME = auto()     # init/update/destroy of one instance
    SAMPLING_LOOP = auto()      # start/stop of frame requests
    ENGINE = auto()             # bulk bootstrap
