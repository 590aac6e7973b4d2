"""
Animator

Drives a single scalar value from start_value to end_value over a duration.
State machine + frame scheduler; observers are notified through an EventBus.

Lifecycle:
    INITIAL --start()--> RUNNING --(duration elapsed)--> END
                         RUNNING --stop()--> STOPPED
                         RUNNING --pause()--> PAUSED --resume()--> RUNNING

Pause/resume semantics:
    start_time is captured once and never rebased. Time spent paused is
    accumulated in paused_ms and excluded from elapsed time, so the value
    continues from where it was paused. resume() schedules the next tick
    one frame interval later.

Re-entrancy:
    stop() and pause() are accepted from inside start and frame listeners,
    even though no tick is outstanding at that point. Outside a dispatch a
    RUNNING animator with no pending tick is rejected.

Completion:
    add_done_callback() callbacks run once, with the animator, when it
    reaches STOPPED or END.
"""

import functools
from typing import Any, Callable, List, Optional, Union

from value_animator.engine.clock import AsyncioClock, Clock
from value_animator.errors import InvalidStateError
from value_animator.models.animator_config import AnimatorConfig
from value_animator.models.easing import EasingFunction
from value_animator.models.enums import AnimatorState
from value_animator.models.events import (
    AnimationEndEvent,
    AnimationEvent,
    AnimationFrameEvent,
    AnimationStartEvent,
    EventType,
)
from value_animator.services.event_bus import EventBus
from value_animator.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ANIMATION)

# Boundary frames are emitted after every other start/end listener has run
_BOUNDARY_FRAME_PRIORITY = -1000


class Animator:
    """
    Time-driven value interpolator

    Example:
        animator = Animator(start_value=0, end_value=100, duration=1000)
        animator.on("frame", lambda e: print(e.value))
        animator.start()
    """

    def __init__(
        self,
        start_value: Optional[float] = None,
        end_value: Optional[float] = None,
        duration: Optional[float] = None,
        delta: Optional[EasingFunction] = None,
        fps: Optional[float] = None,
        enable_start_value_frame: bool = True,
        enable_end_value_frame: bool = True,
        *,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Raises:
            MissingArgumentError: start_value, end_value or duration is None
            InvalidArgumentError: negative duration, non-positive fps,
                non-callable delta
        """
        config = AnimatorConfig.create(
            start_value=start_value,
            end_value=end_value,
            duration=duration,
            delta=delta,
            fps=fps,
            enable_start_value_frame=enable_start_value_frame,
            enable_end_value_frame=enable_end_value_frame,
        )
        self._init(config, event_bus, clock)

    @classmethod
    def from_config(
        cls,
        config: AnimatorConfig,
        *,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ) -> "Animator":
        """Build an Animator from an already validated config"""
        animator = cls.__new__(cls)
        animator._init(config, event_bus, clock)
        return animator

    def _init(self, config: AnimatorConfig, event_bus: Optional[EventBus], clock: Optional[Clock]) -> None:
        self._config = config
        self._bus = event_bus if event_bus is not None else EventBus()
        self._clock: Clock = clock if clock is not None else AsyncioClock()

        self._state = AnimatorState.INITIAL
        self._start_time: Optional[float] = None
        self._handle: Any = None

        self._paused_ms = 0.0
        self._frozen_at: Optional[float] = None
        self._dispatching = False
        self._frame_count = 0
        self._generation = 0
        self._done_callbacks: List[Callable[["Animator"], None]] = []

        self._bus.subscribe(
            EventType.START,
            self._on_start,
            priority=_BOUNDARY_FRAME_PRIORITY,
            filter_fn=self._is_own_event,
        )
        self._bus.subscribe(
            EventType.END,
            self._on_end,
            priority=_BOUNDARY_FRAME_PRIORITY,
            filter_fn=self._is_own_event,
        )

    def __repr__(self):
        return (
            f"Animator({self._config.start_value} → {self._config.end_value}, "
            f"{self._config.duration}ms, {self._state.name})"
        )

    # ------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------

    @property
    def config(self) -> AnimatorConfig:
        return self._config

    @property
    def state(self) -> AnimatorState:
        return self._state

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def paused_ms(self) -> float:
        """Total time spent paused (excluded from elapsed time)"""
        return self._paused_ms

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def frame_count(self) -> int:
        """Number of interpolated frames emitted by ticks"""
        return self._frame_count

    @property
    def is_running(self) -> bool:
        return self._state is AnimatorState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state.is_terminal

    # ------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------

    def on(
        self,
        event_type: Union[EventType, str],
        handler: Callable[[AnimationEvent], None],
        priority: int = 0,
    ) -> None:
        """Subscribe to this animator's start / frame / end events"""
        if isinstance(event_type, str):
            event_type = EventType.from_name(event_type)
        self._bus.subscribe(event_type, handler, priority=priority, filter_fn=self._is_own_event)

    def off(self, event_type: Union[EventType, str], handler: Callable[[AnimationEvent], None]) -> bool:
        if isinstance(event_type, str):
            event_type = EventType.from_name(event_type)
        return self._bus.unsubscribe(event_type, handler, filter_fn=self._is_own_event)

    def add_done_callback(self, callback: Callable[["Animator"], None]) -> None:
        """Call callback(animator) once the animator is STOPPED or END"""
        if self._state.is_terminal:
            callback(self)
            return
        self._done_callbacks.append(callback)

    def remove_done_callback(self, callback: Callable[["Animator"], None]) -> bool:
        try:
            self._done_callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def _notify_done(self) -> None:
        callbacks, self._done_callbacks = self._done_callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception as e:
                log.error("Done callback failed", state=self._state.name, exception=repr(e))

    def _is_own_event(self, event) -> bool:
        return getattr(event, "animator", None) is self

    def _on_start(self, event: AnimationStartEvent) -> None:
        # A start listener may already have stopped or paused us
        if self._config.enable_start_value_frame and self._state is AnimatorState.RUNNING:
            self._bus.publish(AnimationFrameEvent(self, self._config.start_value))

    def _on_end(self, event: AnimationEndEvent) -> None:
        if self._config.enable_end_value_frame:
            self._bus.publish(AnimationFrameEvent(self, self._config.end_value))

    # ------------------------------------------------------------
    # Control
    # ------------------------------------------------------------

    def start(self) -> None:
        """
        INITIAL → RUNNING

        Emits start (and the start-value frame) synchronously, then schedules
        the first tick one frame interval later.
        """
        if self._state is not AnimatorState.INITIAL:
            raise InvalidStateError("animation is started", self._state)

        self._state = AnimatorState.RUNNING
        self._start_time = self._clock.now()

        log.info(
            "Animation started",
            start_value=self._config.start_value,
            end_value=self._config.end_value,
            duration_ms=self._config.duration,
            fps=self._config.fps,
        )

        self._dispatching = True
        try:
            self._bus.publish(AnimationStartEvent(self, self._config.start_value))
        finally:
            self._dispatching = False

        # A start listener may already have stopped or paused us
        if self._state is AnimatorState.RUNNING and self._handle is None:
            self._schedule_tick()

    def stop(self) -> None:
        """RUNNING → STOPPED (terminal)"""
        self._require_live_tick()
        self._cancel_tick()
        self._frozen_at = self._clock.now()
        self._state = AnimatorState.STOPPED
        self._release_subscriptions()
        log.info("Animation stopped", frames=self._frame_count)
        self._notify_done()

    def pause(self) -> None:
        """RUNNING → PAUSED"""
        self._require_live_tick()
        self._cancel_tick()
        self._frozen_at = self._clock.now()
        self._state = AnimatorState.PAUSED
        log.info("Animation paused", elapsed_ms=round(self._elapsed(self._frozen_at), 2))

    def resume(self) -> None:
        """PAUSED → RUNNING, excluding the paused interval from elapsed time"""
        if self._state is not AnimatorState.PAUSED:
            raise InvalidStateError("animation is not paused", self._state)

        paused_for = self._clock.now() - self._frozen_at
        self._paused_ms += paused_for
        self._frozen_at = None
        self._state = AnimatorState.RUNNING
        log.info("Animation resumed", paused_ms=round(paused_for, 2))

        if not self._dispatching:
            self._schedule_tick()

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def get_value(self) -> float:
        """
        Current interpolated value, computed on demand.

        Emits nothing and mutates nothing. While paused or stopped the value
        is frozen at the moment of pause/stop.
        """
        if self._start_time is None:
            raise InvalidStateError("animation is not started", self._state)

        now = self._frozen_at if self._frozen_at is not None else self._clock.now()
        elapsed = self._elapsed(now)
        if elapsed >= self._config.duration:
            return self._config.end_value
        return self._config.value_at(elapsed / self._config.duration)

    def get_start_value(self) -> float:
        return self._config.start_value

    def get_end_value(self) -> float:
        return self._config.end_value

    # ------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------

    def _elapsed(self, now: float) -> float:
        return now - self._start_time - self._paused_ms

    def _require_live_tick(self) -> None:
        if self._state is not AnimatorState.RUNNING:
            raise InvalidStateError("animation is not running", self._state)
        # Inside a tick the handle is legitimately cleared
        if self._handle is None and not self._dispatching:
            raise InvalidStateError("no timeout has found", self._state)

    def _schedule_tick(self) -> None:
        self._generation += 1
        self._handle = self._clock.schedule_after(
            self._config.frame_interval_ms, functools.partial(self._tick, self._generation)
        )

    def _cancel_tick(self) -> None:
        # Invalidates a callback that already fired but has not run yet
        self._generation += 1
        handle, self._handle = self._handle, None
        if handle is not None:
            self._clock.cancel(handle)

    def _release_subscriptions(self) -> None:
        self._bus.unsubscribe(EventType.START, self._on_start, filter_fn=self._is_own_event)
        self._bus.unsubscribe(EventType.END, self._on_end, filter_fn=self._is_own_event)

    def _tick(self, generation: int) -> None:
        # Cancellation may race with an already fired callback
        if generation != self._generation:
            return
        self._handle = None
        if self._state is not AnimatorState.RUNNING:
            return

        self._dispatching = True
        try:
            elapsed = self._elapsed(self._clock.now())

            if elapsed >= self._config.duration:
                self._state = AnimatorState.END
                log.info("Animation ended", frames=self._frame_count, elapsed_ms=round(elapsed, 2))
                self._bus.publish(AnimationEndEvent(self, self._config.end_value))
                self._release_subscriptions()
                self._notify_done()
                return

            value = self._config.value_at(elapsed / self._config.duration)
            self._frame_count += 1
            log.debug("Frame", value=value, elapsed_ms=round(elapsed, 2))
            self._bus.publish(AnimationFrameEvent(self, value))
        finally:
            self._dispatching = False

        # Listeners may have paused, stopped or resumed (and rescheduled) us
        if self._state is AnimatorState.RUNNING and self._handle is None:
            self._schedule_tick()
