"""
Models package - Data models for the effects runtime
"""

from .enums import (
    LogLevel,
    LogCategory,
    EffectState,
    LifecycleState,
    LifecyclePhase,
    AttributeKind,
    DiagnosticKind,
    TrailUnitState,
)
from .geometry import Point, Rect

__all__ = [
    'LogLevel',
    'LogCategory',
    'EffectState',
    'LifecycleState',
    'LifecyclePhase',
    'AttributeKind',
    'DiagnosticKind',
    'TrailUnitState',
    'Point',
    'Rect',
]
