"""
Utility functions for the effects runtime
"""

from .colors import (
    validate_color,
    validate_color_list,
    split_color_list,
    color_format_suggestion,
)
from .math_helpers import (
    lerp,
    clamp,
    normalize_angle,
    shortest_angle_delta,
    pointer_angle,
)

__all__ = [
    'validate_color',
    'validate_color_list',
    'split_color_list',
    'color_format_suggestion',
    'lerp',
    'clamp',
    'normalize_angle',
    'shortest_angle_delta',
    'pointer_angle',
]
