"""
ConfigResolver - attribute map + defaults → resolved configuration

Parse-or-default, never throw: malformed markup degrades to the documented
defaults and is surfaced through Diagnostics only.
"""

import copy
from typing import Any, Dict, Mapping, Optional, Tuple

from host.element import Element
from models.config_spec import AttributeSpec
from models.enums import AttributeKind, DiagnosticKind
from models.errors import ConfigurationError
from services.diagnostics import Diagnostics
from utils.attribute_parsing import parse_attribute
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RESOLVER)


class ConfigResolver:
    """
    Resolves per-element configuration

    Example:
        resolver = ConfigResolver(diagnostics)
        config = resolver.resolve(element, descriptor.defaults, descriptor.attributes)
    """

    def __init__(self, diagnostics: Diagnostics):
        self.diagnostics = diagnostics

    def resolve(
        self,
        element: Element,
        defaults: Mapping[str, Any],
        spec: Mapping[str, AttributeSpec],
    ) -> Dict[str, Any]:
        """
        Overlay parsed attribute values onto a copy of defaults.

        Every key of defaults is present in the result. Keys without a spec
        keep their default. Absent attributes (and empty values for any kind
        but boolean) keep the default silently; rejected values keep the
        default and report a CONFIGURATION diagnostic.
        """
        config = copy.deepcopy(dict(defaults))

        for key, attr_spec in spec.items():
            raw = element.get_attribute(attr_spec.attribute)
            if raw is None:
                continue
            if not raw.strip() and attr_spec.kind != AttributeKind.BOOLEAN:
                continue

            try:
                config[key] = parse_attribute(raw, attr_spec)
            except ConfigurationError as e:
                self.diagnostics.report_error(
                    e,
                    key=key,
                    attribute=attr_spec.attribute,
                    default=defaults.get(key),
                )

        return config

    def coerce(
        self,
        spec: Mapping[str, AttributeSpec],
        key: str,
        value: Any,
    ) -> Tuple[bool, Optional[Any]]:
        """
        Validate a programmatic override for one key.

        Strings are run through the attribute parser; other values must
        already satisfy the spec.

        Returns:
            (accepted, value) - value is None when rejected
        """
        attr_spec = spec.get(key)
        if attr_spec is None:
            self.diagnostics.report(
                DiagnosticKind.CONFIGURATION, "Unknown configuration key", key=key
            )
            return False, None

        if isinstance(value, str) and attr_spec.kind not in (AttributeKind.STRING,):
            try:
                return True, parse_attribute(value, attr_spec)
            except ConfigurationError as e:
                self.diagnostics.report_error(e, key=key, attribute=attr_spec.attribute)
                return False, None

        if attr_spec.kind in (AttributeKind.NUMBER, AttributeKind.FRACTION) and attr_spec.integer \
                and isinstance(value, float) and value.is_integer():
            value = int(value)

        if not attr_spec.accepts(value):
            self.diagnostics.report(
                DiagnosticKind.CONFIGURATION,
                "Override rejected",
                key=key,
                raw=repr(value),
            )
            return False, None
        return True, copy.deepcopy(value)

    def merge(
        self,
        current: Mapping[str, Any],
        overrides: Mapping[str, Any],
        spec: Mapping[str, AttributeSpec],
    ) -> Dict[str, Any]:
        """Apply accepted overrides on a copy of current"""
        merged = copy.deepcopy(dict(current))
        for key, value in overrides.items():
            accepted, coerced = self.coerce(spec, key, value)
            if accepted:
                merged[key] = coerced
        log.debug("Overrides merged", keys=", ".join(overrides.keys()))
        return merged
