"""
Managers for configuration and class lifecycle
"""

from .config_manager import ConfigManager
from .class_manager import ClassLifecycleManager, ComponentClasses

__all__ = ['ConfigManager', 'ClassLifecycleManager', 'ComponentClasses']
