from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict

from value_animator.models.events.base import Event
from value_animator.models.events.types import EventType
from value_animator.models.events.sources import EventSource

if TYPE_CHECKING:
    from value_animator.engine.animator import Animator


@dataclass(init=False)
class AnimationEvent(Event):
    """Event carrying a scalar value emitted by one Animator"""
    animator: "Animator"
    value: float

    def __init__(self, type: EventType, animator: "Animator", value: float):
        super().__init__(type=type, source=EventSource.ANIMATOR)
        self.animator = animator
        self.value = value

    def to_data(self) -> Dict[str, Any]:
        return {"value": self.value}


@dataclass(init=False)
class AnimationStartEvent(AnimationEvent):
    def __init__(self, animator: "Animator", value: float):
        super().__init__(EventType.START, animator, value)


@dataclass(init=False)
class AnimationFrameEvent(AnimationEvent):
    def __init__(self, animator: "Animator", value: float):
        super().__init__(EventType.FRAME, animator, value)


@dataclass(init=False)
class AnimationEndEvent(AnimationEvent):
    def __init__(self, animator: "Animator", value: float):
        super().__init__(EventType.END, animator, value)
