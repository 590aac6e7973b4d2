"""
value_animator - time-driven scalar value interpolation

Interpolates a value from start_value to end_value over a duration using an
easing function, emitting start / frame / end events on an EventBus.
"""

from value_animator.engine.animator import Animator
from value_animator.engine.clock import AsyncioClock, Clock, ManualClock
from value_animator.errors import (
    AnimatorError,
    ConfigError,
    InvalidArgumentError,
    InvalidStateError,
    MissingArgumentError,
)
from value_animator.models.animator_config import AnimatorConfig
from value_animator.models.easing import EASINGS, get_easing
from value_animator.models.enums import AnimatorState
from value_animator.models.events import (
    AnimationEndEvent,
    AnimationEvent,
    AnimationFrameEvent,
    AnimationStartEvent,
    EventType,
)
from value_animator.services.animation_runner import AnimationRunner, run_animation
from value_animator.services.event_bus import EventBus

__version__ = "0.1.0"

__all__ = [
    "Animator",
    "AnimatorConfig",
    "AnimatorState",
    "AsyncioClock",
    "Clock",
    "ManualClock",
    "EventBus",
    "EventType",
    "AnimationEvent",
    "AnimationStartEvent",
    "AnimationFrameEvent",
    "AnimationEndEvent",
    "AnimationRunner",
    "run_animation",
    "EASINGS",
    "get_easing",
    "AnimatorError",
    "ConfigError",
    "InvalidArgumentError",
    "InvalidStateError",
    "MissingArgumentError",
]
