"""Services layer"""

from .diagnostics import Diagnostics
from .config_resolver import ConfigResolver
from .instance_registry import InstanceRegistry
from .event_bus import LifecycleEventBus
from .style_injector import StyleInjector
from .service_container import ServiceContainer

__all__ = [
    "Diagnostics",
    "ConfigResolver",
    "InstanceRegistry",
    "LifecycleEventBus",
    "StyleInjector",
    "ServiceContainer",
]
