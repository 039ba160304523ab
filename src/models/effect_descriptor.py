"""
Effect descriptor - data table describing one effect type

Loaded from config/effects.yaml and validated with pydantic. The descriptor
carries everything that differs between effects as data; behaviour lives in
the effect class named by `behavior`.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from models.config_spec import AttributeSpec


class EffectDescriptor(BaseModel):
    """Declarative description of one effect type"""
    name: str = Field(description="Component name, matched against the selector attribute value")
    behavior: str = Field("class", description="Effect class key in the engine class map")
    selector_attribute: str = Field("wb-component", description="Attribute marking elements for this effect")
    prefix: Optional[str] = Field(None, description="CSS class prefix (default: wb-{name})")
    event_prefix: Optional[str] = Field(None, description="Lifecycle event prefix (default: prefix)")
    attributes: Dict[str, AttributeSpec] = Field(default_factory=dict, description="Config key → attribute spec")
    defaults: Dict[str, Any] = Field(default_factory=dict, description="Config key → default value")
    stylesheet_id: Optional[str] = Field(None, description="Id passed to ensure_style_sheet")
    css: str = Field("", description="Minimal style rules injected once per page")
    requires: List[str] = Field(default_factory=list, description="Host capabilities needed, e.g. ['webgl']")
    style_vars: Dict[str, str] = Field(default_factory=dict, description="Config key → CSS custom property")
    modifier_classes: Dict[str, str] = Field(
        default_factory=dict, description="Config key → class suffix applied when the value is truthy"
    )
    fallback_classes: List[str] = Field(default_factory=list, description="Extra classes removed at destroy")
    settings: Dict[str, Any] = Field(
        default_factory=dict, description="Effect constants that are not attribute driven"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "text-cursor",
                "behavior": "text_cursor",
                "attributes": {
                    "spacing": {"attribute": "wb-spacing", "kind": "number", "min": 10, "max": 500},
                },
                "defaults": {"spacing": 100},
            }
        }

    @model_validator(mode="after")
    def validate_defaults(self):
        for key, spec in self.attributes.items():
            if key not in self.defaults:
                raise ValueError(f"{self.name}: attribute '{key}' has no default")
            if not spec.accepts(self.defaults[key]):
                raise ValueError(
                    f"{self.name}: default for '{key}' ({self.defaults[key]!r}) violates its spec"
                )
        for key in list(self.style_vars) + list(self.modifier_classes):
            if key not in self.defaults:
                raise ValueError(f"{self.name}: '{key}' is not a config key")
        return self

    @property
    def class_prefix(self) -> str:
        return self.prefix or f"wb-{self.name}"

    @property
    def events_prefix(self) -> str:
        return self.event_prefix or self.class_prefix

    @property
    def selector(self) -> str:
        return f'[{self.selector_attribute}="{self.name}"]'

    @property
    def sheet_id(self) -> str:
        return self.stylesheet_id or f"{self.class_prefix}-styles"
