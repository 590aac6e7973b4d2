# engine/clock.py
"""
Clock Protocol
==============
Time source and deferred-callback scheduler used by the Animator.

Implementations:
- AsyncioClock: real wall-clock time on an asyncio event loop
- ManualClock: simulated time, advanced explicitly (tests, offline rendering)

All timestamps and delays are in milliseconds.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol

from value_animator.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CLOCK)


class Clock(Protocol):
    """
    Protocol defining the minimal scheduling capability.

    All implementations must provide:
    - now: monotonically non-decreasing timestamp (ms)
    - schedule_after: run callback once after at least delay_ms
    - cancel: cancel a pending callback (never raises)
    """

    def now(self) -> float:
        """Current timestamp in milliseconds."""
        ...

    def schedule_after(self, delay_ms: float, callback: Callable[[], None]) -> Any:
        """Invoke callback once after at least delay_ms. Returns a cancellable handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """
        Cancel a pending callback.
        Safe on already-fired or already-cancelled handles.
        """
        ...


class AsyncioClock:
    """Clock backed by an asyncio event loop (loop.time / loop.call_later)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        # Resolved lazily so the clock can be built outside a running loop
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000

    def schedule_after(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000, callback)

    def cancel(self, handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()


@dataclass(order=True)
class ScheduledCall:
    """Pending callback on a ManualClock (ordered by due time, then FIFO)"""
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)


class ManualClock:
    """
    Simulated clock.

    Time only moves when advance() / run_until_idle() is called, which makes
    animations deterministic.

    Example:
        clock = ManualClock()
        animator = Animator(start_value=0, end_value=100, duration=1000, clock=clock)
        animator.start()
        clock.advance(500)     # fires every tick due within 500 ms
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[ScheduledCall] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def schedule_after(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0.0, delay_ms), next(self._seq), callback)
        heapq.heappush(self._queue, call)
        return call

    def cancel(self, handle: Optional[ScheduledCall]) -> None:
        if handle is not None:
            handle.cancelled = True

    @property
    def pending(self) -> int:
        """Number of live (not cancelled, not fired) callbacks"""
        return sum(1 for c in self._queue if not c.cancelled)

    def _pop_next(self, deadline: Optional[float]) -> Optional[ScheduledCall]:
        while self._queue:
            call = self._queue[0]
            if call.cancelled:
                heapq.heappop(self._queue)
                continue
            if deadline is not None and call.due > deadline:
                return None
            return heapq.heappop(self._queue)
        return None

    def _fire(self, call: ScheduledCall) -> None:
        self._now = max(self._now, call.due)
        call.fired = True
        call.callback()

    def advance(self, ms: float) -> int:
        """
        Move time forward by ms, firing due callbacks in order.

        Callbacks scheduled while advancing fire too if they fall due before
        the new time.

        Returns:
            Number of callbacks fired
        """
        if ms < 0:
            raise ValueError("ManualClock cannot move backwards")

        deadline = self._now + ms
        fired = 0
        while True:
            call = self._pop_next(deadline)
            if call is None:
                break
            self._fire(call)
            fired += 1

        self._now = deadline
        return fired

    def run_until_idle(self, limit: int = 100_000) -> int:
        """
        Jump from callback to callback until nothing is pending.

        Args:
            limit: Safety cap on fired callbacks

        Returns:
            Number of callbacks fired
        """
        fired = 0
        while fired < limit:
            call = self._pop_next(None)
            if call is None:
                break
            self._fire(call)
            fired += 1

        if fired >= limit:
            log.warn("ManualClock.run_until_idle hit callback limit", limit=limit)
        return fired
