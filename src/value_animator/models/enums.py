"""
Enums for the Animator state machine and logging
"""

from enum import Enum, auto


class AnimatorState(Enum):
    """
    Animator lifecycle states

    INITIAL: Constructed, never started
    RUNNING: Ticks are being scheduled
    PAUSED: Ticks cancelled, can be resumed
    STOPPED: Cancelled by caller (terminal)
    END: Duration elapsed (terminal)
    """
    INITIAL = auto()
    RUNNING = auto()
    PAUSED = auto()
    STOPPED = auto()
    END = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (AnimatorState.STOPPED, AnimatorState.END)


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    ANIMATION = auto()   # Animator transitions and frames
    EVENT = auto()       # Event bus events and handling
    CLOCK = auto()       # Scheduling
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category
