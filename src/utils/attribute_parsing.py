"""
Attribute text parsers

One parser per AttributeKind. Each takes the raw attribute text and returns
the typed value, or raises ConfigurationError. Absence of the attribute is
handled by the caller; these only see present values.
"""

import math
from typing import Any, Callable, Dict

from models.config_spec import AttributeSpec
from models.enums import AttributeKind
from models.errors import ConfigurationError
from utils.colors import color_format_suggestion, validate_color, validate_color_list


def parse_boolean(raw: str, spec: AttributeSpec) -> bool:
    """Any present value except exactly 'false' means True"""
    return raw != "false"


def parse_number(raw: str, spec: AttributeSpec) -> float:
    text = raw.strip()
    try:
        value = float(text)
    except ValueError:
        raise ConfigurationError("Not a number", raw=raw)

    if not math.isfinite(value):
        raise ConfigurationError("Number must be finite", raw=raw)

    if spec.integer:
        value = int(value)

    low, high = spec.bounds()
    if low is not None and value < low:
        raise ConfigurationError(f"Value below minimum {low}", raw=raw)
    if high is not None and value > high:
        raise ConfigurationError(f"Value above maximum {high}", raw=raw)
    return value


def parse_enum(raw: str, spec: AttributeSpec) -> str:
    value = raw.strip()
    if value not in (spec.allowed or []):
        raise ConfigurationError(
            "Value not allowed", raw=raw, allowed=", ".join(spec.allowed or [])
        )
    return value


def parse_color(raw: str, spec: AttributeSpec) -> str:
    result = validate_color(raw)
    if not result.is_valid:
        raise ConfigurationError(
            result.error or "Invalid color", raw=raw, hint=color_format_suggestion(raw)
        )
    return result.normalized


def parse_color_list(raw: str, spec: AttributeSpec) -> list:
    result = validate_color_list(raw, min_count=spec.min_count)
    if not result.is_valid:
        details = {"raw": raw}
        if result.errors:
            details["invalid"] = ", ".join(f"[{i}] {e}" for i, e in result.errors.items())
        raise ConfigurationError(result.error or "Invalid color list", **details)
    return result.colors


def parse_string(raw: str, spec: AttributeSpec) -> str:
    return raw.strip()


PARSERS: Dict[AttributeKind, Callable[[str, AttributeSpec], Any]] = {
    AttributeKind.STRING: parse_string,
    AttributeKind.NUMBER: parse_number,
    AttributeKind.FRACTION: parse_number,
    AttributeKind.BOOLEAN: parse_boolean,
    AttributeKind.ENUM: parse_enum,
    AttributeKind.COLOR: parse_color,
    AttributeKind.COLOR_LIST: parse_color_list,
}


def parse_attribute(raw: str, spec: AttributeSpec) -> Any:
    """
    Parse raw attribute text according to spec.kind

    Raises:
        ConfigurationError: value is unparsable or violates bounds/allowed values
    """
    return PARSERS[spec.kind](raw, spec)
