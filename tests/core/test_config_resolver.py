"""
Tests for ConfigResolver.

Parse-or-default: every default key is present in the result, absent or
invalid attributes keep the default, and only invalid ones are reported.
"""

import pytest

from host.element import Element
from models.config_spec import AttributeSpec
from models.enums import AttributeKind, DiagnosticKind
from services.config_resolver import ConfigResolver
from services.diagnostics import Diagnostics


SPEC = {
    "spacing": AttributeSpec(attribute="wb-spacing", kind=AttributeKind.NUMBER, min=10, max=500),
    "max_points": AttributeSpec(attribute="wb-max-points", kind=AttributeKind.NUMBER, min=1, integer=True),
    "follow": AttributeSpec(attribute="wb-follow", kind=AttributeKind.BOOLEAN),
    "direction": AttributeSpec(attribute="wb-direction", kind=AttributeKind.ENUM, allowed=["left", "right"]),
    "color": AttributeSpec(attribute="wb-color", kind=AttributeKind.COLOR),
    "colors": AttributeSpec(attribute="wb-colors", kind=AttributeKind.COLOR_LIST),
    "text": AttributeSpec(attribute="wb-text", kind=AttributeKind.STRING),
    "roundness": AttributeSpec(attribute="wb-roundness", kind=AttributeKind.FRACTION),
}

DEFAULTS = {
    "spacing": 100,
    "max_points": 5,
    "follow": True,
    "direction": "left",
    "color": "#fff",
    "colors": ["#f00", "#00f"],
    "text": "⚛️",
    "roundness": 0.4,
    "unspecified": "kept",
}


@pytest.fixture
def diagnostics():
    return Diagnostics()


@pytest.fixture
def resolver(diagnostics):
    return ConfigResolver(diagnostics)


def resolve(resolver, **attributes):
    element = Element("div", attributes={k.replace("_", "-"): v for k, v in attributes.items()})
    return resolver.resolve(element, DEFAULTS, SPEC)


class TestResolveDefaults:
    """Absent attributes and keys without spec."""

    def test_no_attributes_returns_defaults(self, resolver, diagnostics):
        """Every default key present, nothing reported."""
        config = resolve(resolver)

        assert config == DEFAULTS
        assert diagnostics.count() == 0

    def test_result_is_a_copy(self, resolver):
        """Mutating the result never touches the defaults table."""
        config = resolve(resolver)
        config["colors"].append("#0f0")

        assert DEFAULTS["colors"] == ["#f00", "#00f"]

    def test_key_without_spec_keeps_default(self, resolver):
        config = resolve(resolver, wb_unspecified="changed")

        assert config["unspecified"] == "kept"

    def test_empty_value_keeps_default_silently(self, resolver, diagnostics):
        """Empty text counts as absent for every kind except boolean."""
        config = resolve(resolver, wb_spacing="", wb_color="  ")

        assert config["spacing"] == 100
        assert config["color"] == "#fff"
        assert diagnostics.count() == 0


class TestResolveNumbers:
    """Number and fraction parsing."""

    def test_valid_number(self, resolver):
        assert resolve(resolver, wb_spacing="40")["spacing"] == 40.0

    def test_unparsable_number_reports_and_keeps_default(self, resolver, diagnostics):
        config = resolve(resolver, wb_spacing="abc")

        assert config["spacing"] == 100
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1
        record = diagnostics.records[-1]
        assert record.details["key"] == "spacing"
        assert record.details["raw"] == "abc"

    def test_out_of_range_rejected(self, resolver, diagnostics):
        config = resolve(resolver, wb_spacing="5")

        assert config["spacing"] == 100
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_bounds_are_inclusive(self, resolver):
        assert resolve(resolver, wb_spacing="10")["spacing"] == 10
        assert resolve(resolver, wb_spacing="500")["spacing"] == 500

    def test_non_finite_rejected(self, resolver, diagnostics):
        for raw in ("inf", "nan", "-Infinity"):
            assert resolve(resolver, wb_spacing=raw)["spacing"] == 100
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 3

    def test_integer_truncated_before_bounds(self, resolver, diagnostics):
        """12.9 → 12; 0.5 truncates to 0 which is below min=1."""
        assert resolve(resolver, wb_max_points="12.9")["max_points"] == 12
        assert isinstance(resolve(resolver, wb_max_points="3")["max_points"], int)

        assert resolve(resolver, wb_max_points="0.5")["max_points"] == 5
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_fraction_limited_to_unit_interval(self, resolver, diagnostics):
        assert resolve(resolver, wb_roundness="0.75")["roundness"] == 0.75
        assert resolve(resolver, wb_roundness="1.5")["roundness"] == 0.4
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1


class TestResolveBooleans:
    """Presence means true unless the value is 'false'."""

    @pytest.mark.parametrize("raw,expected", [
        ("", True),
        ("true", True),
        ("0", True),
        ("no", True),
        ("false", False),
        ("FALSE", True),
        (" False ", True),
        ("false ", True),
    ])
    def test_boolean_values(self, resolver, raw, expected):
        assert resolve(resolver, wb_follow=raw)["follow"] is expected

    def test_boolean_never_reports(self, resolver, diagnostics):
        resolve(resolver, wb_follow="whatever")
        assert diagnostics.count() == 0


class TestResolveOtherKinds:
    """Enum, color, color list and string."""

    def test_enum_allowed(self, resolver):
        assert resolve(resolver, wb_direction="right")["direction"] == "right"

    def test_enum_not_allowed(self, resolver, diagnostics):
        assert resolve(resolver, wb_direction="up")["direction"] == "left"
        assert diagnostics.records[-1].details["allowed"] == "left, right"

    def test_color_normalized(self, resolver):
        assert resolve(resolver, wb_color="ff00ff")["color"] == "#ff00ff"
        assert resolve(resolver, wb_color="CurrentColor")["color"] == "currentColor"

    def test_invalid_color_carries_hint(self, resolver, diagnostics):
        assert resolve(resolver, wb_color="rgb(300, 0, 0)")["color"] == "#fff"
        assert "hint" in diagnostics.records[-1].details

    def test_color_list(self, resolver):
        config = resolve(resolver, wb_colors="#f00, rgb(0, 255, 0), blue")
        assert config["colors"] == ["#f00", "rgb(0, 255, 0)", "blue"]

    def test_color_list_needs_two_entries(self, resolver, diagnostics):
        assert resolve(resolver, wb_colors="#f00")["colors"] == ["#f00", "#00f"]
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_string_is_trimmed(self, resolver):
        assert resolve(resolver, wb_text="  hi  ")["text"] == "hi"


class TestCoerceAndMerge:
    """Programmatic overrides."""

    def test_unknown_key_rejected(self, resolver, diagnostics):
        assert resolver.coerce(SPEC, "nope", 1) == (False, None)
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1

    def test_string_runs_through_parser(self, resolver):
        assert resolver.coerce(SPEC, "spacing", "40") == (True, 40.0)
        assert resolver.coerce(SPEC, "follow", "false") == (True, False)

    def test_typed_value_checked_against_spec(self, resolver):
        assert resolver.coerce(SPEC, "spacing", 40) == (True, 40)
        assert resolver.coerce(SPEC, "spacing", 5) == (False, None)
        assert resolver.coerce(SPEC, "spacing", True) == (False, None)
        assert resolver.coerce(SPEC, "follow", "yes") == (True, True)

    def test_integral_float_becomes_int(self, resolver):
        accepted, value = resolver.coerce(SPEC, "max_points", 7.0)
        assert accepted
        assert value == 7 and isinstance(value, int)

    def test_merge_keeps_rejected_keys(self, resolver, diagnostics):
        current = resolve(resolver)
        merged = resolver.merge(current, {"spacing": 40, "direction": "up"}, SPEC)

        assert merged["spacing"] == 40
        assert merged["direction"] == "left"
        assert current["spacing"] == 100
        assert diagnostics.count(DiagnosticKind.CONFIGURATION) == 1
