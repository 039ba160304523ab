"""Service Container - Dependency injection container for the runtime services"""

from dataclasses import dataclass

from engine.frame_loop import FrameLoop
from host.document import Document
from host.frame_clock import FrameClock
from managers.class_manager import ClassLifecycleManager
from services.config_resolver import ConfigResolver
from services.diagnostics import Diagnostics
from services.event_bus import LifecycleEventBus
from services.style_injector import StyleInjector


@dataclass
class ServiceContainer:
    """
    Everything an effect runtime needs, passed explicitly.

    There are no module-level registries or managers: whoever bootstraps the
    runtime builds a container, and tests build as many isolated containers
    as they like.

    Usage:
        services = ServiceContainer.create(document, ManualFrameClock())
        runtime = EffectRuntime(descriptor, TextCursor, services)
    """

    document: Document
    clock: FrameClock
    frame_loop: FrameLoop
    diagnostics: Diagnostics
    resolver: ConfigResolver
    class_manager: ClassLifecycleManager
    event_bus: LifecycleEventBus
    style_injector: StyleInjector

    @classmethod
    def create(
        cls,
        document: Document,
        clock: FrameClock,
        event_history_limit: int = 100,
        diagnostics_limit: int = 200,
    ) -> "ServiceContainer":
        diagnostics = Diagnostics(history_limit=diagnostics_limit)
        return cls(
            document=document,
            clock=clock,
            frame_loop=FrameLoop(clock),
            diagnostics=diagnostics,
            resolver=ConfigResolver(diagnostics),
            class_manager=ClassLifecycleManager(),
            event_bus=LifecycleEventBus(history_limit=event_history_limit),
            style_injector=StyleInjector(document),
        )
