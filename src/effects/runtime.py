"""
Effect Runtime - init/update/destroy for one effect type

Drives the shared pipeline for every element of one effect:
resolve config → create registry entry → apply classes/styles → setup →
`init` event; and the reverse at destroy. Nothing raised inside crosses
init/update/destroy; failures end up in Diagnostics.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional, Type

from effects.base import BaseEffect, VisualPlan
from host.element import Element
from managers.class_manager import ComponentClasses
from models.effect_descriptor import EffectDescriptor
from models.enums import DiagnosticKind, EffectState, LifecyclePhase
from models.errors import DependencyUnavailable, TeardownFailure
from models.instance import Instance
from services.instance_registry import InstanceRegistry
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EFFECT)

STYLE_KEY = "style_props"
PLAN_KEY = "plan_classes"


class EffectRuntime:
    """
    Example:
        runtime = EffectRuntime(descriptor, TextCursor, services)
        runtime.init_all()
        runtime.update(el, {"spacing": 40})
        runtime.destroy_all()
    """

    def __init__(
        self,
        descriptor: EffectDescriptor,
        effect_cls: Type[BaseEffect],
        services: ServiceContainer,
    ):
        self.descriptor = descriptor
        self.services = services
        self.effect = effect_cls(descriptor, services)
        self.registry = InstanceRegistry(descriptor.name, services.diagnostics)
        self.classes = ComponentClasses.for_prefix(descriptor.class_prefix)
        self.log = log.bind(effect=descriptor.name)

    @property
    def name(self) -> str:
        return self.descriptor.name

    # ------------------------------------------------------------
    # init
    # ------------------------------------------------------------

    def init(self, element: Element) -> Optional[Instance]:
        """
        Attach the effect to element.

        Returns:
            The instance, or None (already initialized or setup failed)
        """
        self.services.style_injector.ensure_for(self.descriptor)

        instance = self.registry.create(element, lambda: self._build(element))
        if instance is None:
            return None

        self._emit(instance, LifecyclePhase.INIT, {"config": copy.deepcopy(instance.config)})
        self.log.info("Initialized", unsupported=instance.unsupported)
        return instance

    def _build(self, element: Element) -> Instance:
        config = self.services.resolver.resolve(
            element, self.descriptor.defaults, self.descriptor.attributes
        )
        instance = Instance(owner=element, effect_name=self.name, config=config)
        self._apply_plan(instance, self.effect.plan(config))

        missing = self.effect.missing_dependencies()
        if missing:
            instance.unsupported = True
            self.services.diagnostics.report_error(
                DependencyUnavailable(
                    "Required capability unavailable", effect=self.name, missing=", ".join(missing)
                )
            )
            self.services.class_manager.apply(element, self.classes.unsupported, instance)
            return instance

        try:
            self.effect.setup(instance)
        except Exception:
            self._release(instance)
            self._clear(instance)
            raise

        self.services.class_manager.set_exclusive_state(
            element, EffectState.ANIMATING, self.descriptor.class_prefix, instance
        )
        return instance

    # ------------------------------------------------------------
    # update
    # ------------------------------------------------------------

    def update(self, element: Element, overrides: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Re-resolve config (from attributes, or by merging overrides).

        Returns:
            False for an element without instance (reported)
        """
        instance = self.registry.get(element)
        if instance is None:
            self.services.diagnostics.report(
                DiagnosticKind.LIFECYCLE_VIOLATION,
                "Update of uninitialized element",
                effect=self.name,
            )
            return False

        previous = copy.deepcopy(instance.config)
        if overrides is None:
            config = self.services.resolver.resolve(
                element, self.descriptor.defaults, self.descriptor.attributes
            )
        else:
            config = self.services.resolver.merge(instance.config, overrides, self.descriptor.attributes)

        instance.config = config
        self._apply_plan(instance, self.effect.plan(config))

        if not instance.unsupported:
            try:
                self.effect.on_update(instance, previous)
            except Exception as e:
                self.log.error("Update hook failed", error=str(e))

        self._emit(instance, LifecyclePhase.UPDATE, {
            "previous": previous,
            "config": copy.deepcopy(config),
        })
        return True

    # ------------------------------------------------------------
    # destroy
    # ------------------------------------------------------------

    def destroy(self, element: Element) -> bool:
        """Reverse every side effect of init; unknown element is a no-op"""
        instance = self.registry.get(element)
        if instance is None:
            return False

        removed = self.registry.remove(element, self._teardown)
        if removed:
            self._emit(instance, LifecyclePhase.DESTROY, None)
            self.log.info("Destroyed")
        return removed

    def _teardown(self, instance: Instance) -> None:
        errors = self._release(instance)
        try:
            if not instance.unsupported:
                self.effect.teardown(instance)
        finally:
            self._clear(instance)
        if errors:
            raise TeardownFailure("Resource release failed", cause=errors[0], count=len(errors))

    def _release(self, instance: Instance) -> List[BaseException]:
        """Listeners, sampling sessions and timers go first"""
        return instance.release()

    def _clear(self, instance: Instance) -> None:
        element = instance.owner
        for prop in instance.runtime.pop(STYLE_KEY, []):
            element.style.remove_property(prop)
        instance.runtime.pop(PLAN_KEY, None)
        self.services.class_manager.remove(
            element,
            list(self.descriptor.fallback_classes) + self.classes.all(),
            instance,
        )

    # ------------------------------------------------------------
    # state transitions
    # ------------------------------------------------------------

    def pause(self, element: Element) -> bool:
        return self._transition(element, EffectState.PAUSED, self.effect.on_pause)

    def resume(self, element: Element) -> bool:
        return self._transition(element, EffectState.ANIMATING, self.effect.on_resume)

    def complete(self, element: Element) -> bool:
        return self._transition(element, EffectState.COMPLETED, self.effect.on_pause)

    def _transition(self, element: Element, state: EffectState, hook) -> bool:
        instance = self.registry.get(element)
        if instance is None or instance.unsupported:
            return False
        self.services.class_manager.set_exclusive_state(
            element, state, self.descriptor.class_prefix, instance
        )
        hook(instance)
        return True

    def current_state(self, element: Element) -> Optional[EffectState]:
        return self.services.class_manager.current_state(element, self.descriptor.class_prefix)

    # ------------------------------------------------------------
    # bulk
    # ------------------------------------------------------------

    def init_all(self, root: Optional[Element] = None) -> List[Instance]:
        """Init every matching element not initialized yet"""
        scope = root if root is not None else self.services.document
        created = []
        for element in scope.query_selector_all(self.descriptor.selector):
            if self.registry.has(element):
                continue
            instance = self.init(element)
            if instance is not None:
                created.append(instance)
        return created

    def destroy_all(self) -> int:
        count = len(self.registry)
        self.registry.for_each(lambda element, _instance: self.destroy(element))
        return count

    def get_instance(self, element: Element) -> Optional[Instance]:
        return self.registry.get(element)

    def get_instances(self) -> List[Instance]:
        return self.registry.instances()

    def is_active(self, element: Element) -> bool:
        return self.registry.has(element)

    # ------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------

    def _apply_plan(self, instance: Instance, plan: VisualPlan) -> None:
        element = instance.owner
        old_classes = instance.runtime.get(PLAN_KEY, [])
        stale = [c for c in old_classes if c not in plan.classes]
        if stale:
            self.services.class_manager.discard(element, stale, instance)
        self.services.class_manager.apply(element, plan.classes, instance)
        instance.runtime[PLAN_KEY] = list(plan.classes)

        old_props = instance.runtime.get(STYLE_KEY, [])
        for prop in old_props:
            if prop not in plan.style:
                element.style.remove_property(prop)
        for prop, value in plan.style.items():
            element.style.set_property(prop, value)
        instance.runtime[STYLE_KEY] = list(plan.style)

    def _emit(
        self,
        instance: Instance,
        phase: LifecyclePhase,
        detail: Optional[Dict[str, Any]],
    ) -> None:
        try:
            self.services.event_bus.emit(
                instance.owner, phase, self.name, self.descriptor.events_prefix, detail
            )
        except Exception as e:
            self.log.error("Lifecycle event failed", phase=phase.value, error=str(e))
