"""
Tests for ClassLifecycleManager.

Ownership: remove() strips only what the instance added (plus the fallback
list), never classes page code put on the element.
"""

import pytest

from host.element import Element
from managers.class_manager import ClassLifecycleManager, ComponentClasses, bem
from models.enums import EffectState
from models.instance import Instance

PREFIX = "wb-shiny-text"


@pytest.fixture
def manager():
    return ClassLifecycleManager()


@pytest.fixture
def element():
    el = Element()
    el.class_list.add("page-owned")
    return el


@pytest.fixture
def instance(element):
    return Instance(owner=element, effect_name="shiny-text", config={})


class TestApplyRemove:

    def test_apply_tracks_classes(self, manager, element, instance):
        manager.apply(element, ["wb-shiny-text", "wb-shiny-text--disabled"], instance)

        assert element.class_list.contains("wb-shiny-text")
        assert instance.added_classes == ["wb-shiny-text", "wb-shiny-text--disabled"]

    def test_apply_accepts_space_separated_string(self, manager, element, instance):
        manager.apply(element, "a b", instance)
        assert instance.added_classes == ["a", "b"]

    def test_remove_keeps_page_classes(self, manager, element, instance):
        manager.apply(element, "wb-shiny-text", instance)
        manager.remove(element, None, instance)

        assert list(element.class_list) == ["page-owned"]
        assert instance.added_classes == []

    def test_remove_fallback_list(self, manager, element, instance):
        """Fallback names are removed even if they were never tracked."""
        element.class_list.add("wb-shiny-text--paused")
        manager.remove(element, ["wb-shiny-text--paused"], instance)

        assert not element.class_list.contains("wb-shiny-text--paused")
        assert element.class_list.contains("page-owned")

    def test_remove_twice_is_harmless(self, manager, element, instance):
        manager.apply(element, "x", instance)
        manager.remove(element, None, instance)
        manager.remove(element, None, instance)

        assert list(element.class_list) == ["page-owned"]

    def test_discard_untracks(self, manager, element, instance):
        manager.apply(element, "a b", instance)
        manager.discard(element, "a", instance)

        assert instance.added_classes == ["b"]
        assert not element.class_list.contains("a")

    def test_update_swaps(self, manager, element, instance):
        manager.apply(element, "old", instance)
        manager.update(element, "old", "new", instance)

        assert instance.added_classes == ["new"]
        assert manager.has_any_class(element, ["x", "new"])


class TestExclusiveState:

    def test_one_state_at_a_time(self, manager, element, instance):
        manager.set_exclusive_state(element, EffectState.ANIMATING, PREFIX, instance)
        manager.set_exclusive_state(element, EffectState.PAUSED, PREFIX, instance)

        assert manager.current_state(element, PREFIX) == EffectState.PAUSED
        assert not element.class_list.contains("wb-shiny-text-animating")
        assert instance.added_classes == ["wb-shiny-text-paused"]

    def test_is_in_state(self, manager, element, instance):
        manager.set_exclusive_state(element, EffectState.COMPLETED, PREFIX, instance)

        assert manager.is_in_state(element, EffectState.COMPLETED, PREFIX)
        assert not manager.is_in_state(element, EffectState.ANIMATING, PREFIX)

    def test_no_state(self, manager, element):
        assert manager.current_state(element, PREFIX) is None


class TestNames:

    def test_component_classes(self):
        classes = ComponentClasses.for_component("gradient-text")

        assert classes.parent == "wb-gradient-text"
        assert classes.animating == "wb-gradient-text-animating"
        assert classes.completed == "wb-gradient-text-completed"
        assert classes.paused == "wb-gradient-text-paused"
        assert classes.unsupported == "wb-gradient-text-unsupported"
        assert len(classes.all()) == 5

    def test_bem(self):
        assert bem("text-cursor", "item") == "wb-text-cursor__item"
        assert bem("ripple-button", None, "active") == "wb-ripple-button--active"
        assert bem("image-trail", "item", "active") == "wb-image-trail__item--active"
