"""
Tests for the clocks.

Tests:
- One-shot and repeating timers on the virtual clock
- Ordering and cancellation
- Asyncio clock against a real event loop
"""

import asyncio

import pytest

from ..engine_core.clock import AsyncioClock, VirtualClock


class TestVirtualClock:
    """Tests for the deterministic clock."""

    def test_call_later_fires_at_delay(self, clock):
        """A one-shot fires once its delay has fully elapsed."""
        fired = []
        clock.call_later(1000, lambda: fired.append(clock.now_ms))

        clock.advance(999)
        assert fired == []

        clock.advance(1)
        assert fired == [1000]

        clock.advance(5000)
        assert fired == [1000]

    def test_call_every_repeats(self, clock):
        """A repeating timer fires once per interval."""
        fired = []
        clock.call_every(1000, lambda: fired.append(clock.now_ms))

        clock.advance(3500)
        assert fired == [1000, 2000, 3000]

    def test_cancel_repeating(self, clock):
        """Cancelling a repeating timer stops it."""
        fired = []
        handle = clock.call_every(1000, lambda: fired.append(clock.now_ms))

        clock.advance(2000)
        handle.cancel()
        clock.advance(5000)

        assert fired == [1000, 2000]
        assert handle.cancelled
        assert clock.pending == 0

    def test_cancel_one_shot(self, clock):
        """A cancelled one-shot never fires."""
        fired = []
        handle = clock.call_later(500, lambda: fired.append("x"))
        handle.cancel()
        handle.cancel()

        clock.advance(1000)
        assert fired == []

    def test_same_instant_fires_in_schedule_order(self, clock):
        """Timers due together fire in the order they were scheduled."""
        fired = []
        clock.call_every(1000, lambda: fired.append("tick"))
        clock.call_later(1000, lambda: fired.append("once"))

        clock.advance(1000)
        assert fired == ["tick", "once"]

    def test_callback_can_cancel_itself(self, clock):
        """A repeating callback may cancel its own timer."""
        fired = []
        handles = []

        def stop_after_two():
            fired.append(clock.now_ms)
            if len(fired) == 2:
                handles[0].cancel()

        handles.append(clock.call_every(100, stop_after_two))
        clock.advance(1000)
        assert fired == [100, 200]

    def test_callback_scheduling_within_window(self, clock):
        """Timers scheduled by a callback run in the same advance() if due."""
        fired = []
        clock.call_later(100, lambda: clock.call_later(100, lambda: fired.append(clock.now_ms)))

        clock.advance(250)
        assert fired == [200]
        assert clock.now_ms == 250

    def test_rejects_non_positive_interval(self, clock):
        with pytest.raises(ValueError):
            clock.call_every(0, lambda: None)


class TestAsyncioClock:
    """Tests for the event-loop clock."""

    def test_call_later(self):
        """One-shot runs on the loop after the delay."""
        fired = []

        async def scenario():
            clock = AsyncioClock()
            clock.call_later(10, lambda: fired.append("done"))
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert fired == ["done"]

    def test_call_every_and_cancel(self):
        """Repeating timer fires until cancelled."""
        fired = []

        async def scenario():
            clock = AsyncioClock()
            handle = clock.call_every(20, lambda: fired.append(1))
            await asyncio.sleep(0.15)
            handle.cancel()
            count = len(fired)
            await asyncio.sleep(0.1)
            return count

        count = asyncio.run(scenario())
        assert count >= 2
        assert len(fired) == count

    def test_cancelled_one_shot(self):
        """Cancelling before the deadline prevents the call."""
        fired = []

        async def scenario():
            clock = AsyncioClock()
            handle = clock.call_later(50, lambda: fired.append("x"))
            handle.cancel()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert fired == []

    def test_one_clock_across_event_loops(self):
        """A shared clock schedules on whichever loop is running now."""
        clock = AsyncioClock()
        fired = []

        async def scenario(label):
            clock.call_later(10, lambda: fired.append(label))
            await asyncio.sleep(0.05)

        asyncio.run(scenario("first"))
        asyncio.run(scenario("second"))
        assert fired == ["first", "second"]
