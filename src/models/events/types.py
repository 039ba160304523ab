from enum import Enum, auto


class EventType(Enum):
    # Instance lifecycle
    EFFECT_INIT = auto()
    EFFECT_UPDATE = auto()
    EFFECT_DESTROY = auto()

    # Sampling loop
    SAMPLING_STARTED = auto()
    SAMPLING_STOPPED = auto()

    # Runtime
    RUNTIME_READY = auto()
