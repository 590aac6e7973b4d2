"""Services layer"""

from .event_bus import EventBus
from .middleware import log_middleware
from .animation_runner import AnimationRunner, run_animation

__all__ = [
    "EventBus",
    "log_middleware",
    "AnimationRunner",
    "run_animation",
]
