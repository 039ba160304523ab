"""
Effect Engine - page-level bootstrap

Builds one EffectRuntime per enabled descriptor and drives them together:
start() initializes every annotated element and announces `wb-ready`,
stop() destroys every instance.
"""

from typing import Dict, Iterable, List, Optional, Type

from effects.base import BaseEffect
from effects.card_hover_3d import CardHover3D
from effects.class_effect import ClassEffect
from effects.image_trail import ImageTrail
from effects.magnet_lines import MagnetLines
from effects.magnetic_button import MagneticButton
from effects.ripple_button import RippleButton
from effects.runtime import EffectRuntime
from effects.shape_blur import ShapeBlur
from effects.text_cursor import TextCursor
from effects.variable_proximity import VariableProximity
from host.element import DomEvent, Element
from managers.config_manager import ConfigManager
from models.effect_descriptor import EffectDescriptor
from models.enums import DiagnosticKind
from models.events import RuntimeReadyEvent
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

READY_EVENT = "wb-ready"

EFFECT_CLASSES: Dict[str, Type[BaseEffect]] = {
    "class": ClassEffect,
    "text_cursor": TextCursor,
    "magnetic_button": MagneticButton,
    "magnet_lines": MagnetLines,
    "image_trail": ImageTrail,
    "ripple_button": RippleButton,
    "card_hover_3d": CardHover3D,
    "variable_proximity": VariableProximity,
    "shape_blur": ShapeBlur,
}


class EffectEngine:
    """
    Example:
        services = ServiceContainer.create(document, clock)
        engine = EffectEngine(services, config.enabled_descriptors())
        engine.start()
        ...
        engine.stop()
    """

    def __init__(self, services: ServiceContainer, descriptors: Iterable[EffectDescriptor]):
        self.services = services
        self.runtimes: Dict[str, EffectRuntime] = {}
        self.started = False

        for descriptor in descriptors:
            effect_cls = EFFECT_CLASSES.get(descriptor.behavior)
            if effect_cls is None:
                services.diagnostics.report(
                    DiagnosticKind.CONFIGURATION,
                    "Unknown effect behavior",
                    effect=descriptor.name,
                    behavior=descriptor.behavior,
                )
                continue
            self.runtimes[descriptor.name] = EffectRuntime(descriptor, effect_cls, services)

        log.info("Effect engine built", effects=len(self.runtimes))

    @classmethod
    def from_config(cls, services: ServiceContainer, config: ConfigManager) -> "EffectEngine":
        return cls(services, config.enabled_descriptors())

    def start(self, root: Optional[Element] = None, components: Optional[List[str]] = None) -> int:
        """
        Initialize every matching element under root (default: the document).

        Returns:
            Number of instances created
        """
        if self.started:
            self.services.diagnostics.report(
                DiagnosticKind.LIFECYCLE_VIOLATION, "Effect engine already started"
            )
            return 0

        created = 0
        for name, runtime in self.runtimes.items():
            if components is not None and name not in components:
                continue
            created += len(runtime.init_all(root))
        self.started = True

        self.services.document.dispatch_event(DomEvent(
            READY_EVENT,
            detail={"components": self.names(), "instances": created},
            bubbles=False,
        ))
        self.services.event_bus.publish(RuntimeReadyEvent(
            components=self.names(), instance_count=created
        ))
        log.info("Effect engine started", instances=created)
        return created

    def refresh(self, root: Optional[Element] = None) -> int:
        """Pick up elements added since start"""
        return sum(len(runtime.init_all(root)) for runtime in self.runtimes.values())

    def stop(self) -> int:
        """Destroy every instance of every effect"""
        destroyed = sum(runtime.destroy_all() for runtime in self.runtimes.values())
        self.started = False
        log.info("Effect engine stopped", destroyed=destroyed)
        return destroyed

    def runtime(self, name: str) -> Optional[EffectRuntime]:
        return self.runtimes.get(name)

    def names(self) -> List[str]:
        return list(self.runtimes)

    def instance_count(self) -> int:
        return sum(len(runtime.registry) for runtime in self.runtimes.values())
