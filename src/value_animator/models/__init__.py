"""Domain models"""

from .enums import AnimatorState, LogLevel, LogCategory
from .animator_config import AnimatorConfig, DEFAULT_FPS

__all__ = [
    "AnimatorState",
    "LogLevel",
    "LogCategory",
    "AnimatorConfig",
    "DEFAULT_FPS",
]
