"""
Class Effect - data-only recipe

For effects whose whole behaviour is CSS: the parent class, modifier
classes and CSS custom properties from the descriptor are the visual plan.
gradient-text, shiny-text, shimmer-button, pulse-button, hover-zoom and
friends all run on this class.
"""

from effects.base import BaseEffect


class ClassEffect(BaseEffect):
    """Plan-only effect; setup and teardown have nothing to do"""
