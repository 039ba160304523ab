"""
Effects package - effect behaviour classes, the per-effect runtime and the
page-level engine
"""

from .runtime import EffectRuntime
from .engine import EffectEngine, EFFECT_CLASSES

__all__ = ["EffectRuntime", "EffectEngine", "EFFECT_CLASSES"]
