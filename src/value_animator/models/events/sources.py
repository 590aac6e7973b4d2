from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers"""
    ANIMATOR = auto()       # Events emitted by an Animator
