"""
Base Effect Class

An effect class holds the behaviour of one effect type; it is created once
per runtime and keeps all per-element state in Instance.runtime. Data
(attributes, defaults, classes, CSS variables) comes from the descriptor.

Subclasses override some of:
    plan(config)                       pure: classes + style properties
    setup(instance)                    create nodes, listeners, sessions
    on_update(instance, previous)      react to a new config
    teardown(instance)                 restore what setup changed

Everything registered through listen(), later(), every(), session(),
create_child() and override_style() is released automatically before
teardown() runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, TYPE_CHECKING

from engine.geometry_cache import CachedRect
from engine.sampling_loop import SamplingCallbacks, SamplingProfile, SamplingSession
from host.element import DomEvent, Element, EventTarget
from host.frame_clock import TimerHandle
from models.effect_descriptor import EffectDescriptor
from models.enums import LifecyclePhase
from models.errors import TeardownFailure
from models.instance import Instance

if TYPE_CHECKING:
    from services.service_container import ServiceContainer

SESSIONS_KEY = "sessions"
TIMERS_KEY = "timers"


def css_value(value: Any) -> str:
    """Format a config value for a CSS custom property"""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(css_value(v) for v in value)
    return str(value)


@dataclass
class VisualPlan:
    """Classes and inline style properties derived from a config"""
    classes: List[str] = field(default_factory=list)
    style: Dict[str, str] = field(default_factory=dict)


class BaseEffect:
    """Behaviour of one effect type"""

    # config keys baked into sessions/timers at setup; a change rebuilds them
    restart_keys: Tuple[str, ...] = ()

    def __init__(self, descriptor: EffectDescriptor, services: "ServiceContainer"):
        self.descriptor = descriptor
        self.services = services

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def prefix(self) -> str:
        return self.descriptor.class_prefix

    def setting(self, key: str, default: Any = None) -> Any:
        return self.descriptor.settings.get(key, default)

    # ------------------------------------------------------------
    # Pure planning
    # ------------------------------------------------------------

    def plan(self, config: Dict[str, Any]) -> VisualPlan:
        """
        Classes: the parent class plus modifier classes. A modifier template
        containing '{value}' is formatted with the config value; otherwise
        it is applied when the value is truthy.
        """
        classes = [self.prefix]
        for key, template in self.descriptor.modifier_classes.items():
            value = config.get(key)
            if "{value}" in template:
                if value is not None and value != "":
                    classes.append(f"{self.prefix}--{template.format(value=value)}")
            elif value:
                classes.append(f"{self.prefix}--{template}")

        style = {
            prop: css_value(config[key])
            for key, prop in self.descriptor.style_vars.items()
            if config.get(key) is not None
        }
        return VisualPlan(classes=classes, style=style)

    def missing_dependencies(self) -> List[str]:
        capabilities = self.services.document.capabilities
        return [dep for dep in self.descriptor.requires if dep not in capabilities]

    # ------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------

    def setup(self, instance: Instance) -> None:
        pass

    def on_update(self, instance: Instance, previous: Dict[str, Any]) -> None:
        if any(previous.get(key) != instance.config.get(key) for key in self.restart_keys):
            self.restart(instance)

    def restart(self, instance: Instance) -> None:
        """
        Release everything setup registered and run setup again.

        Release errors are reported as TEARDOWN_FAILURE; the rebuild still
        runs so the instance keeps its listeners and sessions.
        """
        errors = instance.release()
        for error in errors:
            self.services.diagnostics.report_error(
                TeardownFailure("Resource release failed", cause=error, error=str(error)),
                effect=self.name,
                phase="restart",
            )
        instance.runtime.pop(SESSIONS_KEY, None)
        instance.runtime.pop(TIMERS_KEY, None)
        self.teardown(instance)
        self.setup(instance)

    def teardown(self, instance: Instance) -> None:
        pass

    def on_pause(self, instance: Instance) -> None:
        for session in instance.runtime.get(SESSIONS_KEY, []):
            session.pause()

    def on_resume(self, instance: Instance) -> None:
        for session in instance.runtime.get(SESSIONS_KEY, []):
            session.resume()

    # ------------------------------------------------------------
    # Resource helpers (auto-released at destroy)
    # ------------------------------------------------------------

    def listen(
        self,
        instance: Instance,
        target: EventTarget,
        event_type: str,
        callback: Callable[[DomEvent], None],
    ) -> None:
        target.add_event_listener(event_type, callback)
        instance.add_disposer(lambda: target.remove_event_listener(event_type, callback))

    def override_style(self, instance: Instance, element: Element, prop: str, value: Any) -> None:
        """Set an inline style property; the page's previous inline value comes back at release"""
        had_value = prop in element.style
        previous = element.style.get_property(prop)
        element.style.set_property(prop, value)

        def restore():
            if had_value:
                element.style.set_property(prop, previous)
            else:
                element.style.remove_property(prop)

        instance.add_disposer(restore)

    def later(self, instance: Instance, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """
        One-shot timer cancelled at destroy. Only pending timers are kept on
        the instance; fired and cancelled handles are dropped.
        """
        timers = self._timers(instance)

        def fire():
            timers.discard(handle)
            callback()

        handle = self.services.clock.call_later(delay, fire)
        timers.difference_update([t for t in timers if not t.pending])
        timers.add(handle)
        return handle

    def _timers(self, instance: Instance) -> Set[TimerHandle]:
        timers = instance.runtime.get(TIMERS_KEY)
        if timers is None:
            timers = instance.runtime[TIMERS_KEY] = set()

            def cancel_all():
                for handle in list(timers):
                    handle.cancel()
                timers.clear()

            instance.add_disposer(cancel_all)
        return timers

    def every(self, instance: Instance, interval: float, callback: Callable[[], None]) -> None:
        """Repeat callback every interval seconds until destroy"""
        state: Dict[str, Optional[TimerHandle]] = {"handle": None}

        def tick():
            # rescheduled before the callback; a raising tick keeps the series alive
            state["handle"] = self.services.clock.call_later(interval, tick)
            callback()

        state["handle"] = self.services.clock.call_later(interval, tick)

        def cancel():
            if state["handle"] is not None:
                state["handle"].cancel()

        instance.add_disposer(cancel)

    def create_child(
        self,
        instance: Instance,
        parent: Element,
        tag: str = "div",
        class_name: str = "",
    ) -> Element:
        child = self.services.document.create_element(tag)
        if class_name:
            child.class_list.add(*class_name.split())
        parent.append_child(child)
        instance.add_disposer(child.remove)
        return child

    def cached_rect(self, element: Element) -> CachedRect:
        return CachedRect(element)

    def session(
        self,
        instance: Instance,
        profile: SamplingProfile,
        callbacks: Optional[SamplingCallbacks] = None,
    ) -> SamplingSession:
        """
        Build a sampling session for instance; frame request start/stop is
        announced as `start`/`stop` lifecycle events on the owner.
        """
        callbacks = callbacks or SamplingCallbacks()
        user_start, user_stop = callbacks.on_start, callbacks.on_stop

        def on_start(session: SamplingSession):
            self._announce(instance, LifecyclePhase.START)
            if user_start:
                user_start(session)

        def on_stop(session: SamplingSession):
            if user_stop:
                user_stop(session)
            self._announce(instance, LifecyclePhase.STOP)

        callbacks.on_start = on_start
        callbacks.on_stop = on_stop

        key = (self.name, id(instance), len(instance.runtime.get(SESSIONS_KEY, [])))
        session = SamplingSession(key, self.services.frame_loop, self.services.clock, profile, callbacks)
        instance.runtime.setdefault(SESSIONS_KEY, []).append(session)
        instance.add_disposer(session.dispose)
        return session

    def _announce(self, instance: Instance, phase: LifecyclePhase) -> None:
        if not instance.is_active:
            return
        self.services.event_bus.emit(
            instance.owner, phase, self.name, self.descriptor.events_prefix
        )
