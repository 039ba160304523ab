"""
Enums for the effects runtime
"""

from enum import Enum, auto


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # YAML loading, descriptor validation
    RESOLVER = auto()    # Attribute parsing, defaults
    REGISTRY = auto()    # Instance create/remove
    CLASSES = auto()     # Class list mutations
    SAMPLING = auto()    # Frame loop, trail, smoothing
    EVENT = auto()       # Lifecycle event bus
    EFFECT = auto()      # Effect runtime init/update/destroy
    STYLE = auto()       # Style sheet injection
    HOST = auto()        # Host element model, clocks
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()     # Default general category


class EffectState(Enum):
    """
    Mutually exclusive visual state of an instance.

    Value is the class-name suffix: `{prefix}-{value}`.
    """
    ANIMATING = "animating"
    COMPLETED = "completed"
    PAUSED = "paused"


class LifecycleState(Enum):
    """Instance lifecycle"""
    UNINITIALIZED = auto()
    ACTIVE = auto()
    DESTROYED = auto()


class LifecyclePhase(Enum):
    """
    Lifecycle event phases.

    Value is the event-name suffix: `{event_prefix}-{value}`.
    """
    INIT = "init"
    UPDATE = "update"
    DESTROY = "destroy"
    START = "start"
    STOP = "stop"


class AttributeKind(Enum):
    """How a declarative attribute value is parsed"""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    COLOR = "color"
    COLOR_LIST = "color_list"
    FRACTION = "fraction"      # number restricted to 0..1


class DiagnosticKind(Enum):
    """Recoverable anomaly categories reported through Diagnostics"""
    CONFIGURATION = auto()            # bad attribute value, default kept
    LIFECYCLE_VIOLATION = auto()      # double init, update of unknown element
    DEPENDENCY_UNAVAILABLE = auto()   # required capability missing
    TEARDOWN_FAILURE = auto()         # exception during destroy cleanup


class TrailUnitState(Enum):
    """Trail unit lifecycle inside TrailBuffer"""
    ACTIVE = auto()
    EXITING = auto()    # evicted, exit transition running
    REMOVED = auto()    # detached from the visual tree


class FalloffMode(Enum):
    """Distance falloff curves for proximity effects"""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    GAUSSIAN = "gaussian"
