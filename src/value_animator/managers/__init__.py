"""Configuration managers"""

from .config_manager import ConfigManager
from .animation_manager import AnimationManager

__all__ = ["ConfigManager", "AnimationManager"]
