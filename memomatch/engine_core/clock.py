"""
Clock - Countdown ticks and delayed one-shot callbacks.

The state machine never sleeps. It asks a Clock to call it back:
- every tick interval, for the countdown
- once after a delay, for the mismatch reveal window and hint expiry

Two implementations:
- VirtualClock: time only moves when advance() is called (tests, CLI)
- AsyncioClock: callbacks run on an asyncio event loop (API server)
"""

from __future__ import annotations
import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable


Callback = Callable[[], None]


class TimerHandle(ABC):
    """A scheduled callback that can be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the callback from running (again). Safe to call twice."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Clock(ABC):
    """Scheduler used by the state machine."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        """Run `callback` once after `delay_ms` milliseconds."""

    @abstractmethod
    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        """Run `callback` every `interval_ms` milliseconds until cancelled."""


# =============================================================================
# Virtual clock
# =============================================================================

class _VirtualTimer(TimerHandle):
    def __init__(self, due_ms: int, callback: Callback, interval_ms: int | None):
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class VirtualClock(Clock):
    """
    Deterministic clock driven by advance().

    Timers fire in due-time order; timers due at the same instant fire
    in the order they were scheduled.

    Usage:
        clock = VirtualClock()
        clock.call_later(1000, on_timeout)
        clock.advance(1000)  # on_timeout runs here
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: list[tuple[int, int, _VirtualTimer]] = []
        self._sequence = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        timer = _VirtualTimer(self.now_ms + max(0, delay_ms), callback, None)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = _VirtualTimer(self.now_ms + interval_ms, callback, interval_ms)
        self._push(timer)
        return timer

    def advance(self, ms: int) -> None:
        """Move time forward by `ms`, running every callback that falls due."""
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = due_ms
            if timer.interval_ms is not None:
                timer.due_ms = due_ms + timer.interval_ms
                self._push(timer)
            timer.callback()
        self.now_ms = target

    @property
    def pending(self) -> int:
        """Number of live timers still queued."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def _push(self, timer: _VirtualTimer) -> None:
        heapq.heappush(self._queue, (timer.due_ms, next(self._sequence), timer))


# =============================================================================
# Asyncio clock
# =============================================================================

class _AsyncioTimer(TimerHandle):
    def __init__(self):
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioClock(Clock):
    """
    Clock backed by an asyncio event loop.

    Callbacks run on the loop thread, one at a time, so the state
    machine still sees a single-threaded stream of transitions.
    Without an explicit loop, each timer goes on the loop running when
    it is scheduled, so the clock can outlive any single loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        timer = _AsyncioTimer()

        def fire():
            if not timer.cancelled:
                callback()

        timer._handle = self.loop.call_later(max(0, delay_ms) / 1000.0, fire)
        return timer

    def call_every(self, interval_ms: int, callback: Callback) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = _AsyncioTimer()
        loop = self.loop
        interval = interval_ms / 1000.0
        # Schedule against absolute deadlines so slow callbacks don't drift the countdown
        next_deadline = loop.time() + interval

        def fire():
            nonlocal next_deadline
            if timer.cancelled:
                return
            next_deadline += interval
            timer._handle = loop.call_at(next_deadline, fire)
            callback()

        timer._handle = loop.call_at(next_deadline, fire)
        return timer
