"""
Animator configuration

Immutable once built. Validation follows the construction contract:
required fields are checked for presence (None), never truthiness, so a
value of 0 is accepted.
"""

from dataclasses import dataclass, field
from typing import Optional

from value_animator.errors import InvalidArgumentError, MissingArgumentError
from value_animator.models.easing import EasingFunction, ease_linear

DEFAULT_FPS = 60


@dataclass(frozen=True)
class AnimatorConfig:
    """
    Configuration for a single scalar animation

    Attributes:
        start_value: Value at progress 0
        end_value: Value at progress 1
        duration: Total duration in milliseconds
        delta: Easing function (progress 0.0-1.0) → multiplier
        fps: Target ticks per second
        enable_start_value_frame: Emit a frame with start_value inside start()
        enable_end_value_frame: Emit a frame with end_value after the end event
    """
    start_value: float
    end_value: float
    duration: float
    delta: EasingFunction = field(default=ease_linear, compare=False)
    fps: float = DEFAULT_FPS
    enable_start_value_frame: bool = True
    enable_end_value_frame: bool = True

    @classmethod
    def create(
        cls,
        start_value: Optional[float] = None,
        end_value: Optional[float] = None,
        duration: Optional[float] = None,
        delta: Optional[EasingFunction] = None,
        fps: Optional[float] = None,
        enable_start_value_frame: bool = True,
        enable_end_value_frame: bool = True,
    ) -> "AnimatorConfig":
        """
        Validate raw options and build a config

        Raises:
            MissingArgumentError: start_value, end_value or duration is None
            InvalidArgumentError: negative duration, non-positive fps,
                non-callable delta
        """
        if start_value is None:
            raise MissingArgumentError("start_value")
        if end_value is None:
            raise MissingArgumentError("end_value")
        if duration is None:
            raise MissingArgumentError("duration")

        if duration < 0:
            raise InvalidArgumentError("duration", duration, "must not be negative")

        if fps is None:
            fps = DEFAULT_FPS
        elif fps <= 0:
            raise InvalidArgumentError("fps", fps, "must be positive")

        if delta is None:
            delta = ease_linear
        elif not callable(delta):
            raise InvalidArgumentError("delta", delta, "must be callable")

        return cls(
            start_value=start_value,
            end_value=end_value,
            duration=duration,
            delta=delta,
            fps=fps,
            enable_start_value_frame=bool(enable_start_value_frame),
            enable_end_value_frame=bool(enable_end_value_frame),
        )

    @property
    def frame_interval_ms(self) -> float:
        """Nominal delay between ticks"""
        return 1000 / self.fps

    def value_at(self, fraction: float) -> float:
        """Interpolated value for progress fraction in [0, 1)"""
        magnitude = (self.end_value - self.start_value) * self.delta(fraction)
        return self.start_value + magnitude
