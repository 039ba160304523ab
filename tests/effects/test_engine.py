"""
Tests for the page-level EffectEngine and the data-only recipes it runs.
"""

import pytest

from effects.engine import EffectEngine, READY_EVENT
from models.effect_descriptor import EffectDescriptor
from models.enums import DiagnosticKind
from models.events import EventType


@pytest.fixture
def engine(services, config):
    return EffectEngine.from_config(services, config)


def component(add_element, name, parent=None):
    return add_element(parent=parent, **{"wb-component": name})


class TestEngine:

    def test_one_runtime_per_enabled_effect(self, engine):
        assert len(engine.names()) == 17
        assert engine.names()[0] == "text-cursor"
        assert engine.runtime("shape-blur") is not None
        assert engine.runtime("nope") is None

    def test_start_initializes_and_announces(self, engine, services, add_element):
        component(add_element, "shimmer-button")
        component(add_element, "text-cursor")
        ready = []
        published = []
        services.document.add_event_listener(READY_EVENT, ready.append)
        services.event_bus.subscribe(EventType.RUNTIME_READY, published.append)

        assert engine.start() == 2

        assert engine.instance_count() == 2
        assert ready[0].detail["instances"] == 2
        assert ready[0].detail["components"] == engine.names()
        assert published[0].instance_count == 2

    def test_start_twice_reported(self, engine, services, add_element):
        component(add_element, "hover-zoom")
        engine.start()

        assert engine.start() == 0
        assert engine.instance_count() == 1
        assert services.diagnostics.count(DiagnosticKind.LIFECYCLE_VIOLATION) == 1

    def test_start_under_root(self, engine, add_element):
        section = add_element("section")
        inside = component(add_element, "pulse-button", parent=section)
        component(add_element, "pulse-button")

        assert engine.start(root=section) == 1
        assert engine.runtime("pulse-button").is_active(inside)

    def test_component_filter(self, engine, add_element):
        component(add_element, "shimmer-button")
        component(add_element, "pulse-button")

        assert engine.start(components=["pulse-button"]) == 1

    def test_refresh_picks_up_new_elements(self, engine, add_element):
        component(add_element, "blur-text")
        engine.start()
        component(add_element, "blur-text")

        assert engine.refresh() == 1
        assert engine.instance_count() == 2

    def test_stop_destroys_everything(self, engine, services, add_element):
        button = component(add_element, "magnetic-button")
        component(add_element, "gradient-text")
        engine.start()

        assert engine.stop() == 2

        assert engine.instance_count() == 0
        assert not engine.started
        assert list(button.class_list) == []
        assert services.document.listener_count("pointermove") == 0

    def test_unknown_behavior_skipped(self, services):
        engine = EffectEngine(services, [EffectDescriptor(name="mystery", behavior="warp_drive")])

        assert engine.names() == []
        assert services.diagnostics.count(DiagnosticKind.CONFIGURATION) == 1


class TestClassRecipes:

    def test_shimmer_button(self, make_runtime, add_element):
        button = component(add_element, "shimmer-button")
        button.set_attribute("wb-shimmer-direction", "right")
        button.set_attribute("wb-shadow", "false")

        make_runtime("shimmer-button").init(button)

        assert list(button.class_list) == [
            "wb-shimmer-button",
            "wb-shimmer-button--direction-right",
            "wb-shimmer-button--speed-medium",
            "wb-shimmer-button--scale",
            "wb-shimmer-button-animating",
        ]
        assert button.style.get_property("--wb-shimmer-color") == "rgba(255, 255, 255, 0.2)"

    def test_tooltip_uses_own_prefix(self, make_runtime, add_element):
        target = component(add_element, "tooltip-text")
        target.set_attribute("wb-tooltip-position", "left")
        target.set_attribute("wb-tooltip-arrow", "false")
        seen = []
        target.add_event_listener("wb-tooltip-init", seen.append)

        make_runtime("tooltip-text").init(target)

        assert list(target.class_list) == [
            "wb-tooltip",
            "wb-tooltip--left",
            "wb-tooltip--size-medium",
            "wb-tooltip--animation-fade",
            "wb-tooltip-animating",
        ]
        assert target.style.get_property("--wb-tooltip-duration") == "0.3"
        assert len(seen) == 1

    def test_gradient_colors(self, make_runtime, add_element):
        heading = component(add_element, "gradient-text")
        heading.set_attribute("wb-colors", "#ff0000, 00f")
        heading.set_attribute("wb-animation-speed", "3")

        make_runtime("gradient-text").init(heading)

        assert heading.style.get_property("--wb-gradient-colors") == "#ff0000, #00f"
        assert heading.style.get_property("--wb-animation-duration") == "3"

    def test_too_few_colors_fall_back(self, make_runtime, add_element, services):
        button = component(add_element, "gradient-button")
        button.set_attribute("wb-colors", "#fff")

        instance = make_runtime("gradient-button").init(button)

        assert len(instance.config["colors"]) == 5
        assert services.diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_hover_zoom_update(self, make_runtime, add_element, services):
        image = component(add_element, "hover-zoom")
        runtime = make_runtime("hover-zoom")
        runtime.init(image)
        assert image.style.get_property("--wb-zoom-scale") == "1.5"

        image.set_attribute("wb-zoom-scale", "3")
        runtime.update(image)
        assert image.style.get_property("--wb-zoom-scale") == "3"

        image.set_attribute("wb-zoom-scale", "9")
        runtime.update(image)
        assert image.style.get_property("--wb-zoom-scale") == "1.5"
        assert services.diagnostics.count(DiagnosticKind.CONFIGURATION) == 1
