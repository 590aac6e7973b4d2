"""Animator engine: state machine and clocks"""

from .clock import Clock, AsyncioClock, ManualClock
from .animator import Animator

__all__ = ["Clock", "AsyncioClock", "ManualClock", "Animator"]
