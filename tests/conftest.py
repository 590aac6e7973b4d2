from typing import List, Tuple

import pytest

from value_animator.engine.animator import Animator
from value_animator.engine.clock import ManualClock
from value_animator.models.enums import LogLevel
from value_animator.models.events import AnimationEvent, EventType
from value_animator.services.event_bus import EventBus
from value_animator.utils.logger import configure_logger, get_logger


class EventRecorder:
    """Collects (event name, value) pairs emitted by one animator, in order."""

    def __init__(self, animator: Animator):
        self.events: List[Tuple[str, float]] = []
        for event_type in EventType:
            animator.on(event_type, self._record)

    def _record(self, event: AnimationEvent) -> None:
        self.events.append((event.type.name.lower(), event.value))

    def of(self, name: str) -> List[float]:
        return [value for event_name, value in self.events if event_name == name]

    @property
    def frames(self) -> List[float]:
        return self.of("frame")

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the global logger quiet and restore it after each test."""
    logger = get_logger()
    saved = (logger.min_level, logger.use_colors)
    configure_logger(LogLevel.WARN, use_colors=False)
    yield logger
    configure_logger(*saved)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def make_animator(clock, bus):
    """
    Factory for animators on the shared ManualClock / EventBus.

    fps=10 keeps the tick interval at exactly 100 ms.
    """
    def _make(**options):
        options.setdefault("fps", 10)
        return Animator(clock=clock, event_bus=bus, **options)
    return _make


@pytest.fixture
def recorder():
    return EventRecorder
