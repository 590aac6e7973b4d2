"""
Tests for the Animator state machine and frame scheduling.

All tests run on a ManualClock with fps=10 (100 ms tick interval), so every
tick lands on an exact timestamp.
"""

import pytest

from value_animator.engine.animator import Animator
from value_animator.engine.clock import ManualClock
from value_animator.errors import InvalidArgumentError, InvalidStateError, MissingArgumentError
from value_animator.models.animator_config import AnimatorConfig
from value_animator.models.easing import ease_in_quad
from value_animator.models.enums import AnimatorState
from value_animator.models.events import EventType


class TestConstruction:
    """Construction contract: presence, not truthiness."""

    def test_missing_duration_raises(self):
        with pytest.raises(MissingArgumentError) as exc_info:
            Animator(start_value=0, end_value=10)
        assert exc_info.value.code == "MISSING_ARGUMENT"
        assert exc_info.value.details["argument"] == "duration"

    def test_missing_start_value_raises(self):
        with pytest.raises(MissingArgumentError, match="start value is required"):
            Animator(end_value=10, duration=100)

    def test_missing_end_value_raises(self):
        with pytest.raises(MissingArgumentError, match="end value is required"):
            Animator(start_value=0, duration=100)

    def test_zero_values_are_valid(self, clock):
        animator = Animator(start_value=0, end_value=0, duration=0, clock=clock)
        assert animator.state is AnimatorState.INITIAL
        assert animator.config.duration == 0

    def test_defaults(self, clock):
        animator = Animator(start_value=1, end_value=2, duration=300, clock=clock)
        assert animator.config.fps == 60
        assert animator.config.delta(0.25) == 0.25
        assert animator.config.enable_start_value_frame is True
        assert animator.config.enable_end_value_frame is True

    def test_invalid_fps(self, clock):
        with pytest.raises(InvalidArgumentError):
            Animator(start_value=0, end_value=1, duration=100, fps=0, clock=clock)

    def test_negative_duration(self, clock):
        with pytest.raises(InvalidArgumentError):
            Animator(start_value=0, end_value=1, duration=-5, clock=clock)

    def test_non_callable_delta(self, clock):
        with pytest.raises(InvalidArgumentError):
            Animator(start_value=0, end_value=1, duration=100, delta=3, clock=clock)

    def test_from_config(self, clock, bus):
        config = AnimatorConfig.create(start_value=5, end_value=15, duration=200, fps=10)
        animator = Animator.from_config(config, clock=clock, event_bus=bus)
        assert animator.config is config
        assert animator.event_bus is bus
        assert animator.get_start_value() == 5
        assert animator.get_end_value() == 15


class TestStart:

    def test_start_emits_start_then_start_frame(self, make_animator, recorder):
        animator = make_animator(start_value=3, end_value=7, duration=500)
        events = recorder(animator)

        animator.start()

        assert events.events == [("start", 3), ("frame", 3)]
        assert animator.state is AnimatorState.RUNNING
        assert animator.start_time == 0

    def test_start_frame_can_be_disabled(self, make_animator, recorder):
        animator = make_animator(start_value=3, end_value=7, duration=500, enable_start_value_frame=False)
        events = recorder(animator)

        animator.start()

        assert events.events == [("start", 3)]

    def test_first_tick_after_one_interval(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()

        clock.advance(99)
        assert events.frames == [0]

        clock.advance(1)
        assert events.frames == [0, pytest.approx(10)]

    def test_double_start_raises_and_keeps_schedule(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=10, duration=500)
        events = recorder(animator)
        animator.start()

        with pytest.raises(InvalidStateError, match="animation is started"):
            animator.start()

        assert events.of("start") == [0]
        assert clock.pending == 1
        clock.advance(100)
        assert events.frames == [0, pytest.approx(2)]


class TestRunToEnd:

    def test_full_run_linear(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)

        animator.start()
        clock.run_until_idle()

        expected = [0] + [pytest.approx(v) for v in range(10, 100, 10)] + [100]
        assert events.frames == expected
        assert events.of("end") == [100]
        assert events.names[-2:] == ["end", "frame"]
        assert animator.state is AnimatorState.END
        assert animator.frame_count == 9
        assert clock.pending == 0

    def test_no_frames_after_end(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=1, duration=300)
        events = recorder(animator)
        animator.start()
        clock.advance(300)
        count = len(events.events)

        clock.advance(5000)

        assert len(events.events) == count
        assert events.of("end") == [1]
        assert events.frames.count(1) == 1

    def test_end_frame_can_be_disabled(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=1, duration=200, enable_end_value_frame=False)
        events = recorder(animator)
        animator.start()
        clock.run_until_idle()

        assert events.names == ["start", "frame", "frame", "end"]
        assert events.frames == [0, pytest.approx(0.5)]

    def test_zero_duration_ends_on_first_tick(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=10, duration=0)
        events = recorder(animator)
        animator.start()
        clock.advance(100)

        assert events.events == [("start", 0), ("frame", 0), ("end", 10), ("frame", 10)]
        assert animator.state is AnimatorState.END

    def test_easing_applied(self, clock, make_animator, recorder):
        animator = make_animator(start_value=10, end_value=20, duration=1000, delta=ease_in_quad)
        events = recorder(animator)
        animator.start()
        clock.advance(500)

        # fraction 0.1 .. 0.5 squared
        assert events.frames[1:] == [pytest.approx(10 + 10 * f * f) for f in (0.1, 0.2, 0.3, 0.4, 0.5)]

    def test_decreasing_range(self, clock, make_animator, recorder):
        animator = make_animator(start_value=1, end_value=0, duration=400)
        events = recorder(animator)
        animator.start()
        clock.run_until_idle()

        assert events.frames == [1, pytest.approx(0.75), pytest.approx(0.5), pytest.approx(0.25), 0]

    def test_get_value_between_ticks(self, clock, make_animator, recorder):
        """get_value() uses the current time, not the last tick's."""
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()

        clock.advance(350)

        assert events.frames == [0, pytest.approx(10), pytest.approx(20), pytest.approx(30)]
        assert animator.get_value() == pytest.approx(35)


class TestGetValue:

    def test_before_start_raises(self, make_animator):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        with pytest.raises(InvalidStateError):
            animator.get_value()

    def test_linear_progress(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        animator.start()

        values = []
        for _ in range(9):
            clock.advance(111)
            values.append(animator.get_value())

        assert values == [pytest.approx(100 * (111 * (i + 1)) / 1000) for i in range(9)]
        assert values == sorted(values)

    def test_does_not_emit(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()
        clock.advance(50)
        before = list(events.events)

        animator.get_value()
        animator.get_value()

        assert events.events == before

    def test_after_end_returns_end_value(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        animator.start()
        clock.advance(5000)
        assert animator.get_value() == 100

    def test_bounds_unaffected_by_ticks(self, clock, make_animator):
        animator = make_animator(start_value=-4, end_value=8, duration=700)
        animator.start()
        for _ in range(10):
            clock.advance(100)
            assert animator.get_start_value() == -4
            assert animator.get_end_value() == 8


class TestStop:

    def test_stop_before_start_raises_and_keeps_state(self, make_animator):
        animator = make_animator(start_value=0, end_value=10, duration=500)

        with pytest.raises(InvalidStateError, match="animation is not running") as exc_info:
            animator.stop()

        assert exc_info.value.details["state"] == "INITIAL"
        assert animator.state is AnimatorState.INITIAL

    def test_stop_cancels_ticks(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=10, duration=500)
        events = recorder(animator)
        animator.start()
        clock.advance(200)

        animator.stop()
        clock.advance(1000)

        assert animator.state is AnimatorState.STOPPED
        assert animator.is_finished
        assert events.of("end") == []
        assert len(events.frames) == 3
        assert clock.pending == 0

    def test_stop_twice_raises(self, make_animator):
        animator = make_animator(start_value=0, end_value=10, duration=500)
        animator.start()
        animator.stop()
        with pytest.raises(InvalidStateError):
            animator.stop()

    def test_value_frozen_after_stop(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        animator.start()
        clock.advance(420)
        animator.stop()
        clock.advance(300)
        assert animator.get_value() == pytest.approx(42)

    def test_stop_from_frame_listener(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)

        def stop_at_thirty(event):
            if event.value >= 29:
                animator.stop()

        animator.on("frame", stop_at_thirty)
        animator.start()
        clock.advance(2000)

        assert animator.state is AnimatorState.STOPPED
        assert events.frames[-1] == pytest.approx(30)
        assert clock.pending == 0

    def test_stop_from_start_listener(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.on(EventType.START, lambda event: animator.stop(), priority=10)

        animator.start()
        clock.advance(2000)

        assert animator.state is AnimatorState.STOPPED
        assert events.of("end") == []
        assert events.frames == []
        assert clock.pending == 0

    def test_pause_from_start_listener(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.on(EventType.START, lambda event: animator.pause(), priority=10)

        animator.start()
        clock.advance(500)

        assert animator.state is AnimatorState.PAUSED
        assert events.frames == []
        assert clock.pending == 0

        animator.resume()
        clock.advance(100)
        assert events.frames == [pytest.approx(10)]


class TestPauseResume:

    def test_pause_requires_running(self, make_animator):
        animator = make_animator(start_value=0, end_value=10, duration=500)
        with pytest.raises(InvalidStateError, match="animation is not running"):
            animator.pause()

    def test_resume_requires_paused(self, make_animator):
        animator = make_animator(start_value=0, end_value=10, duration=500)
        animator.start()
        with pytest.raises(InvalidStateError, match="animation is not paused"):
            animator.resume()
        assert animator.state is AnimatorState.RUNNING

    def test_no_frames_while_paused(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()
        clock.advance(250)

        animator.pause()
        frames_at_pause = list(events.frames)
        clock.advance(1000)

        assert animator.state is AnimatorState.PAUSED
        assert events.frames == frames_at_pause
        assert clock.pending == 0

    def test_resume_continues_without_restart(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()
        clock.advance(250)
        animator.pause()
        clock.advance(1000)

        animator.resume()

        assert animator.state is AnimatorState.RUNNING
        assert events.of("start") == [0]
        assert animator.paused_ms == 1000
        assert animator.start_time == 0

        clock.advance(100)
        assert events.frames[-1] == pytest.approx(35)

    def test_paused_interval_excluded_until_end(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)
        animator.start()
        clock.advance(500)
        animator.pause()
        clock.advance(3000)
        animator.resume()
        clock.advance(400)

        assert animator.state is AnimatorState.RUNNING
        assert animator.get_value() == pytest.approx(90)

        clock.run_until_idle()
        assert animator.state is AnimatorState.END
        assert events.of("end") == [100]
        assert clock.now() == 4000

    def test_value_frozen_while_paused(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        animator.start()
        clock.advance(300)
        animator.pause()
        clock.advance(500)
        assert animator.get_value() == pytest.approx(30)

    def test_pause_and_resume_inside_frame_listener(self, clock, make_animator, recorder):
        animator = make_animator(start_value=0, end_value=100, duration=1000)
        events = recorder(animator)

        def bounce(event):
            if animator.frame_count == 2:
                animator.pause()
                animator.resume()

        animator.on("frame", bounce)
        animator.start()
        clock.advance(300)

        assert animator.state is AnimatorState.RUNNING
        assert clock.pending == 1
        assert events.frames == [0, pytest.approx(10), pytest.approx(20), pytest.approx(30)]


class _LeakyClock(ManualClock):
    """ManualClock whose cancel() loses the race: cancelled callbacks still fire."""

    def cancel(self, handle):
        pass


class TestTickGuard:

    def test_tick_after_stop_is_noop(self, bus, recorder):
        clock = _LeakyClock()
        animator = Animator(start_value=0, end_value=10, duration=1000, fps=10, clock=clock, event_bus=bus)
        events = recorder(animator)
        animator.start()

        animator.stop()
        clock.advance(100)

        assert events.frames == [0]
        assert animator.state is AnimatorState.STOPPED

    def test_tick_after_pause_is_noop(self, bus, recorder):
        clock = _LeakyClock()
        animator = Animator(start_value=0, end_value=10, duration=1000, fps=10, clock=clock, event_bus=bus)
        events = recorder(animator)
        animator.start()

        animator.pause()
        clock.advance(100)

        assert events.frames == [0]
        assert animator.state is AnimatorState.PAUSED

    def test_stale_tick_after_resume_does_not_duplicate(self, bus, recorder):
        clock = _LeakyClock()
        animator = Animator(start_value=0, end_value=100, duration=1000, fps=10, clock=clock, event_bus=bus)
        events = recorder(animator)
        animator.start()
        clock.advance(50)

        animator.pause()
        animator.resume()
        clock.advance(100)

        # Only the tick scheduled by resume() runs (at t=150)
        assert events.frames == [0, pytest.approx(15)]
        assert clock.pending == 1


class TestSharedBus:

    def test_listeners_only_see_their_animator(self, clock, make_animator, recorder):
        a = make_animator(start_value=0, end_value=1, duration=200)
        b = make_animator(start_value=10, end_value=20, duration=400)
        events_a = recorder(a)
        events_b = recorder(b)

        a.start()
        b.start()
        clock.run_until_idle()

        assert events_a.frames == [0, pytest.approx(0.5), 1]
        assert events_b.frames == [10, pytest.approx(12.5), pytest.approx(15), pytest.approx(17.5), 20]

    def test_bus_subscriber_sees_everything(self, clock, bus, make_animator):
        seen = []
        bus.subscribe(EventType.END, lambda event: seen.append(event.animator))
        a = make_animator(start_value=0, end_value=1, duration=100)
        b = make_animator(start_value=0, end_value=1, duration=200)

        a.start()
        b.start()
        clock.run_until_idle()

        assert seen == [a, b]

    def test_internal_subscriptions_released_on_end(self, clock, bus, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=100)
        assert bus.handler_count(EventType.START) == 1
        animator.start()
        clock.run_until_idle()
        assert bus.handler_count(EventType.START) == 0
        assert bus.handler_count(EventType.END) == 0

    def test_event_payload(self, clock, bus, make_animator):
        animator = make_animator(start_value=2, end_value=4, duration=100)
        animator.start()
        start_event = bus.get_event_history(limit=2)[0]
        assert start_event.type is EventType.START
        assert start_event.to_data() == {"value": 2}

    def test_off_only_removes_own_registration(self, clock, make_animator):
        a = make_animator(start_value=0, end_value=1, duration=200)
        b = make_animator(start_value=10, end_value=20, duration=200)
        seen = []

        def handler(event):
            seen.append((event.animator, event.value))

        a.on("frame", handler)
        b.on("frame", handler)
        assert a.off("frame", handler) is True

        a.start()
        b.start()
        clock.run_until_idle()

        assert [animator for animator, _ in seen] == [b, b, b]
        assert [value for _, value in seen] == [10, pytest.approx(15), 20]

    def test_off_does_not_release_other_animators_boundary_frames(self, clock, bus, make_animator):
        a = make_animator(start_value=0, end_value=1, duration=100)
        b = make_animator(start_value=0, end_value=1, duration=100)
        a.start()
        a.stop()

        assert bus.handler_count(EventType.START) == 1
        assert bus.handler_count(EventType.END) == 1
        b.start()
        assert bus.get_event_history(limit=1)[0].value == 0


class TestDoneCallbacks:

    def test_called_on_end(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=100)
        done = []
        animator.add_done_callback(lambda a: done.append(a.state))

        animator.start()
        clock.run_until_idle()

        assert done == [AnimatorState.END]

    def test_called_on_stop(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=1000)
        done = []
        animator.add_done_callback(lambda a: done.append(a.state))

        animator.start()
        clock.advance(300)
        animator.stop()
        clock.run_until_idle()

        assert done == [AnimatorState.STOPPED]

    def test_not_called_on_pause(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=1000)
        done = []
        animator.add_done_callback(done.append)

        animator.start()
        animator.pause()

        assert done == []

    def test_added_after_finish_runs_immediately(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=100)
        animator.start()
        clock.run_until_idle()

        done = []
        animator.add_done_callback(done.append)
        assert done == [animator]

    def test_removed_callback_is_not_called(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=100)
        done = []
        animator.add_done_callback(done.append)
        assert animator.remove_done_callback(done.append) is True
        assert animator.remove_done_callback(done.append) is False

        animator.start()
        clock.run_until_idle()

        assert done == []

    def test_failing_callback_does_not_break_others(self, clock, make_animator):
        animator = make_animator(start_value=0, end_value=1, duration=100)
        done = []

        def broken(a):
            raise RuntimeError("boom")

        animator.add_done_callback(broken)
        animator.add_done_callback(done.append)
        animator.start()
        clock.run_until_idle()

        assert done == [animator]
        assert animator.state is AnimatorState.END
