"""
Tests for EffectRuntime: the init/update/destroy pipeline shared by every
effect, its diagnostics paths and the visual state classes.
"""

import pytest

from effects.base import BaseEffect, TIMERS_KEY
from effects.class_effect import ClassEffect
from effects.runtime import EffectRuntime
from host.document import Document
from host.frame_clock import ManualFrameClock
from models.config_spec import AttributeSpec
from models.effect_descriptor import EffectDescriptor
from models.enums import AttributeKind, DiagnosticKind, EffectState, LifecycleState
from models.events import EventType
from models.geometry import Rect
from services.service_container import ServiceContainer


DEMO = EffectDescriptor(
    name="demo",
    attributes={
        "speed": AttributeSpec(attribute="wb-speed", kind=AttributeKind.NUMBER, min=0.1, max=60),
        "disabled": AttributeSpec(attribute="wb-disabled", kind=AttributeKind.BOOLEAN),
        "direction": AttributeSpec(
            attribute="wb-direction", kind=AttributeKind.ENUM, allowed=["left", "right"]
        ),
    },
    defaults={"speed": 5, "disabled": False, "direction": "left"},
    style_vars={"speed": "--wb-demo-speed"},
    modifier_classes={"disabled": "disabled", "direction": "direction-{value}"},
    fallback_classes=["wb-demo--legacy"],
    css=".wb-demo { color: red; }",
)


class Recorder(BaseEffect):
    """Counts hook calls and registers one of each auto-released resource"""

    def setup(self, instance):
        instance.runtime["calls"] = ["setup"]
        self.listen(instance, instance.owner, "click", lambda e: None)
        self.later(instance, 10, lambda: None)
        self.create_child(instance, instance.owner, "span", "wb-demo__child")

    def on_update(self, instance, previous):
        instance.runtime["calls"].append("update")

    def teardown(self, instance):
        instance.runtime["calls"].append("teardown")


class BrokenTeardown(BaseEffect):
    def teardown(self, instance):
        raise RuntimeError("teardown bug")


class BrokenSetup(BaseEffect):
    def setup(self, instance):
        self.listen(instance, instance.owner, "click", lambda e: None)
        raise RuntimeError("setup bug")


class FlakyTicker(BaseEffect):
    def setup(self, instance):
        ticks = instance.runtime["ticks"] = []

        def tick():
            ticks.append(len(ticks))
            if len(ticks) == 1:
                raise RuntimeError("tick bug")

        self.every(instance, 1.0, tick)


class Rebuilding(BaseEffect):
    restart_keys = ("speed",)

    def setup(self, instance):
        instance.runtime["setups"] = instance.runtime.get("setups", 0) + 1
        self.listen(instance, instance.owner, "click", lambda e: None)
        if instance.runtime["setups"] == 1:
            instance.add_disposer(self.broken)

    @staticmethod
    def broken():
        raise RuntimeError("listener already gone")


@pytest.fixture
def element(add_element):
    el = add_element("div", Rect(0, 0, 100, 40), **{"wb-component": "demo", "class": "page-owned"})
    return el


@pytest.fixture
def runtime(services):
    return EffectRuntime(DEMO, ClassEffect, services)


def dom_events(element, *names):
    seen = []
    for name in names:
        element.add_event_listener(name, seen.append)
    return seen


class TestInit:

    def test_init_applies_plan(self, runtime, element, services):
        instance = runtime.init(element)

        assert instance.lifecycle_state == LifecycleState.ACTIVE
        assert list(element.class_list) == [
            "page-owned", "wb-demo", "wb-demo--direction-left", "wb-demo-animating",
        ]
        assert element.style.get_property("--wb-demo-speed") == "5"
        assert services.document.has_style_sheet("wb-demo-styles")

    def test_init_event_carries_config(self, runtime, element):
        seen = dom_events(element, "wb-demo-init")
        element.set_attribute("wb-speed", "12")

        runtime.init(element)

        assert seen[0].detail["config"] == {"speed": 12.0, "disabled": False, "direction": "left"}
        assert seen[0].detail["component"] == "demo"

    def test_double_init_reported(self, runtime, element, services):
        first = runtime.init(element)

        assert runtime.init(element) is None
        assert runtime.get_instance(element) is first
        assert services.diagnostics.count(DiagnosticKind.LIFECYCLE_VIOLATION) == 1

    def test_bad_attribute_keeps_default(self, runtime, element, services):
        element.set_attribute("wb-speed", "fast")

        instance = runtime.init(element)

        assert instance.config["speed"] == 5
        assert services.diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_modifier_from_boolean(self, runtime, element):
        element.set_attribute("wb-disabled", "")
        runtime.init(element)

        assert element.class_list.contains("wb-demo--disabled")

    def test_bus_subscribers_notified(self, runtime, element, services):
        seen = []
        services.event_bus.subscribe(EventType.EFFECT_INIT, seen.append)

        runtime.init(element)

        assert seen[0].element is element

    def test_failing_setup_leaves_nothing(self, services, element):
        runtime = EffectRuntime(DEMO, BrokenSetup, services)

        assert runtime.init(element) is None
        assert not runtime.is_active(element)
        assert list(element.class_list) == ["page-owned"]
        assert element.listener_count("click") == 0
        assert len(element.style) == 0


class TestUpdate:

    def test_update_from_attributes(self, runtime, element):
        seen = dom_events(element, "wb-demo-update")
        runtime.init(element)
        element.set_attribute("wb-direction", "right")
        element.set_attribute("wb-speed", "9")

        assert runtime.update(element) is True

        assert element.class_list.contains("wb-demo--direction-right")
        assert not element.class_list.contains("wb-demo--direction-left")
        assert element.style.get_property("--wb-demo-speed") == "9"
        assert seen[0].detail["previous"]["direction"] == "left"
        assert seen[0].detail["config"]["direction"] == "right"

    def test_update_with_overrides(self, runtime, element, services):
        instance = runtime.init(element)

        runtime.update(element, {"speed": 30, "direction": "up"})

        assert instance.config["speed"] == 30
        assert instance.config["direction"] == "left"
        assert services.diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_update_calls_hook(self, services, element):
        runtime = EffectRuntime(DEMO, Recorder, services)
        instance = runtime.init(element)

        runtime.update(element, {"speed": 2})

        assert instance.runtime["calls"] == ["setup", "update"]

    def test_update_of_unknown_element(self, runtime, element, services):
        assert runtime.update(element) is False
        assert services.diagnostics.count(DiagnosticKind.LIFECYCLE_VIOLATION) == 1

    def test_stale_modifier_removed(self, runtime, element):
        runtime.init(element)
        runtime.update(element, {"disabled": True})
        assert element.class_list.contains("wb-demo--disabled")

        runtime.update(element, {"disabled": False})
        assert not element.class_list.contains("wb-demo--disabled")

    def test_restart_key_rebuilds_despite_release_error(self, services, element):
        runtime = EffectRuntime(DEMO, Rebuilding, services)
        instance = runtime.init(element)

        runtime.update(element, {"speed": 10})

        assert instance.runtime["setups"] == 2
        assert element.listener_count("click") == 1
        assert services.diagnostics.count(DiagnosticKind.TEARDOWN_FAILURE) == 1
        assert services.diagnostics.records[-1].details["phase"] == "restart"


class TestDestroy:

    def test_destroy_restores_element(self, services, element):
        runtime = EffectRuntime(DEMO, Recorder, services)
        instance = runtime.init(element)
        element.class_list.add("wb-demo--legacy")

        assert runtime.destroy(element) is True

        assert list(element.class_list) == ["page-owned"]
        assert len(element.style) == 0
        assert element.children == []
        assert element.listener_count("click") == 0
        assert services.clock.pending_timers == 0
        assert instance.runtime["calls"] == ["setup", "teardown"]
        assert instance.lifecycle_state == LifecycleState.DESTROYED

    def test_destroy_event_without_detail(self, runtime, element):
        seen = dom_events(element, "wb-demo-destroy")
        runtime.init(element)
        runtime.destroy(element)

        assert len(seen) == 1
        assert seen[0].detail is None

    def test_destroy_twice_is_no_op(self, runtime, element, services):
        runtime.init(element)
        runtime.destroy(element)

        assert runtime.destroy(element) is False
        assert services.diagnostics.count() == 0

    def test_init_after_destroy(self, services, element):
        runtime = EffectRuntime(DEMO, Recorder, services)
        seen = dom_events(element, "wb-demo-init", "wb-demo-destroy")

        runtime.init(element)
        runtime.destroy(element)
        instance = runtime.init(element)
        assert runtime.init(element) is None

        assert runtime.get_instances() == [instance]
        assert [e.type for e in seen] == ["wb-demo-init", "wb-demo-destroy", "wb-demo-init"]
        assert element.listener_count("click") == 1
        assert len(element.children) == 1
        assert list(element.class_list).count("wb-demo") == 1
        assert services.clock.pending_timers == 1

    def test_teardown_failure_reported(self, services, element):
        runtime = EffectRuntime(DEMO, BrokenTeardown, services)
        runtime.init(element)

        assert runtime.destroy(element) is True

        assert not runtime.is_active(element)
        assert list(element.class_list) == ["page-owned"]
        assert services.diagnostics.count(DiagnosticKind.TEARDOWN_FAILURE) == 1

    def test_failing_disposer_reported(self, runtime, element, services):
        instance = runtime.init(element)

        def broken():
            raise RuntimeError("listener already gone")

        instance.add_disposer(broken)
        runtime.destroy(element)

        assert services.diagnostics.count(DiagnosticKind.TEARDOWN_FAILURE) == 1
        assert not runtime.is_active(element)


class TestTimers:

    def test_failing_tick_keeps_repeating(self, services, element):
        runtime = EffectRuntime(DEMO, FlakyTicker, services)
        instance = runtime.init(element)

        services.clock.advance(3.5)

        assert instance.runtime["ticks"] == [0, 1, 2]
        runtime.destroy(element)
        assert services.clock.pending_timers == 0

    def test_fired_timers_are_not_kept(self, services, element):
        runtime = EffectRuntime(DEMO, Recorder, services)
        instance = runtime.init(element)
        effect = runtime.effect
        baseline = len(instance.disposers)

        for _ in range(50):
            effect.later(instance, 0.05, lambda: None)
            services.clock.advance(0.1)
        cancelled = [effect.later(instance, 0.1, lambda: None) for _ in range(50)]
        for handle in cancelled:
            handle.cancel()
        effect.later(instance, 0.1, lambda: None)

        assert len(instance.disposers) == baseline
        # the setup timer and the last one
        assert len(instance.runtime[TIMERS_KEY]) == 2


class TestDependencies:

    def test_missing_capability_marks_unsupported(self):
        document = Document()
        services = ServiceContainer.create(document, ManualFrameClock())
        descriptor = DEMO.model_copy(update={"requires": ["webgl"]})
        runtime = EffectRuntime(descriptor, Recorder, services)
        element = document.create_element("div")
        document.body.append_child(element)

        instance = runtime.init(element)

        assert instance is not None
        assert instance.unsupported
        assert element.class_list.contains("wb-demo-unsupported")
        assert element.children == []
        assert services.diagnostics.count(DiagnosticKind.DEPENDENCY_UNAVAILABLE) == 1

        runtime.destroy(element)
        assert not element.class_list.contains("wb-demo-unsupported")


class TestStates:

    def test_pause_resume_complete(self, runtime, element):
        runtime.init(element)

        runtime.pause(element)
        assert runtime.current_state(element) == EffectState.PAUSED
        runtime.resume(element)
        assert runtime.current_state(element) == EffectState.ANIMATING
        runtime.complete(element)
        assert runtime.current_state(element) == EffectState.COMPLETED

    def test_state_of_unknown_element(self, runtime, element):
        assert runtime.pause(element) is False


class TestBulk:

    def test_init_all_skips_registered(self, runtime, element, add_element):
        other = add_element(**{"wb-component": "demo"})
        add_element(**{"wb-component": "something-else"})
        runtime.init(element)

        created = runtime.init_all()

        assert [i.owner for i in created] == [other]
        assert len(runtime.get_instances()) == 2

    def test_init_all_under_root(self, runtime, add_element):
        root = add_element()
        inside = add_element(parent=root, **{"wb-component": "demo"})
        add_element(**{"wb-component": "demo"})

        created = runtime.init_all(root)

        assert [i.owner for i in created] == [inside]

    def test_destroy_all(self, runtime, element, add_element):
        add_element(**{"wb-component": "demo"})
        runtime.init_all()

        assert runtime.destroy_all() == 2
        assert runtime.get_instances() == []
