import pytest

from effects.engine import EFFECT_CLASSES
from effects.runtime import EffectRuntime
from host.document import Document
from host.frame_clock import ManualFrameClock
from managers.config_manager import ConfigManager
from models.effect_descriptor import EffectDescriptor
from models.enums import LogLevel
from models.geometry import Rect
from services.service_container import ServiceContainer
from utils.logger import get_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Only errors reach stdout while tests run; the sink is detached afterwards."""
    logger = get_logger()
    previous = logger.min_level
    logger.min_level = LogLevel.ERROR
    yield logger
    logger.min_level = previous
    logger.set_sink(None)


@pytest.fixture
def document():
    doc = Document(capabilities=["webgl"])
    doc.body.set_rect(Rect(0, 0, 1280, 800))
    return doc


@pytest.fixture
def clock():
    return ManualFrameClock()


@pytest.fixture
def services(document, clock):
    return ServiceContainer.create(document, clock)


@pytest.fixture(scope="session")
def config():
    """The shipped configuration (config/config.yaml and its includes)."""
    manager = ConfigManager()
    manager.load()
    return manager


@pytest.fixture
def make_runtime(services, config):
    """
    Build an EffectRuntime for a shipped descriptor.

    Usage:
        runtime = make_runtime("text-cursor")
    """

    def factory(name: str, **descriptor_overrides) -> EffectRuntime:
        descriptor = config.get_descriptor(name)
        assert descriptor is not None, f"{name} missing from config"
        if descriptor_overrides:
            data = descriptor.model_dump()
            data.update(descriptor_overrides)
            descriptor = EffectDescriptor.model_validate(data)
        return EffectRuntime(descriptor, EFFECT_CLASSES[descriptor.behavior], services)

    return factory


@pytest.fixture
def add_element(document):
    """
    Create an element under body with attributes and a layout box.

    Usage:
        el = add_element("div", rect=Rect(0, 0, 100, 50), **{"wb-component": "text-cursor"})
    """

    def factory(tag: str = "div", rect: Rect = Rect(0, 0, 200, 100), parent=None, **attributes):
        element = document.create_element(tag)
        for name, value in attributes.items():
            element.set_attribute(name, value)
        element.set_rect(rect)
        (parent or document.body).append_child(element)
        return element

    return factory
