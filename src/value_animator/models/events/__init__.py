"""
Event system for the Animator

Lifecycle events (start / frame / end) carrying a scalar value.
"""

from value_animator.models.events.types import EventType
from value_animator.models.events.base import Event
from value_animator.models.events.sources import EventSource
from value_animator.models.events.animation_events import (
    AnimationEvent,
    AnimationStartEvent,
    AnimationFrameEvent,
    AnimationEndEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "AnimationEvent",
    "AnimationStartEvent",
    "AnimationFrameEvent",
    "AnimationEndEvent",
]
