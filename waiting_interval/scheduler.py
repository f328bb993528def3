"""Deterministic clock and scheduler utilities for simulations and tests.

Use these helpers to control time explicitly instead of sleeping.

- `SimClock`: monotonically increasing time in milliseconds; you call
  `advance(ms)` to move time forward.
- `SimScheduler`: schedules callbacks relative to the simulated time and
  executes them when `run_due()` is called.

Typical loop:

    scheduler.run_due()
    clock.advance(10)

`run_for(total_ms, step_ms)` wraps exactly that loop.
"""

import heapq
from typing import Callable, List


class SimClock:
    """Monotonic simulated clock measured in milliseconds."""

    def __init__(self) -> None:
        self.t = 0

    def now_ms(self) -> float:
        """Return the current simulated time in milliseconds."""
        return self.t

    def advance(self, ms: float) -> None:
        """Advance simulated time by `ms` milliseconds (non-negative)."""
        if ms < 0:
            raise ValueError(f"cannot move the clock backwards ({ms}ms)")
        self.t += ms


class SimScheduler:
    """Scheduler backed by a min-heap of scheduled callbacks.

    Schedule callbacks using `call_later(ms, cb)`; get a cancel function back.
    Execute ready callbacks by calling `run_due()` after advancing the clock.
    A counter ensures FIFO ordering for callbacks scheduled for the same time.
    """

    def __init__(self, clock: SimClock) -> None:
        self.clock = clock
        self.heap: List[list] = []
        self._counter = 0  # tie-breaker for stable ordering

    def now_ms(self) -> float:
        return self.clock.now_ms()

    def call_later(self, ms: float, cb: Callable[[], None]):
        """Schedule `cb` to run after `ms` milliseconds of simulated time.

        Returns a zero-arg cancel function; if invoked before the callback is
        due, the callback will not run. Calling it later is a no-op.
        """
        when = self.clock.now_ms() + ms
        self._counter += 1
        event = [when, self._counter, cb, True]
        heapq.heappush(self.heap, event)

        def cancel():
            event[3] = False

        return cancel

    def run_due(self) -> int:
        """Run all callbacks whose scheduled time is <= current time.

        Time is sampled when the pass starts; events scheduled during the
        pass are left for the next one. Returns the number of callbacks
        executed.
        """
        ran = 0
        now = self.clock.now_ms()
        last = self._counter
        while self.heap and self.heap[0][0] <= now and self.heap[0][1] <= last:
            when, _, cb, live = heapq.heappop(self.heap)
            if live:
                cb()
                ran += 1
        return ran

    def run_for(self, total_ms: float, step_ms: float = 1) -> int:
        """Alternate `run_due()` and `advance(step_ms)` until `total_ms` passed."""
        if step_ms <= 0:
            raise ValueError("step_ms must be positive")
        ran = 0
        end = self.clock.now_ms() + total_ms
        while True:
            ran += self.run_due()
            # Callbacks may have moved the clock past `end` themselves.
            remaining = end - self.clock.now_ms()
            if remaining <= 0:
                return ran
            self.clock.advance(min(step_ms, remaining))

    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for event in self.heap if event[3])

    def dump_state(self, n: int = 5) -> str:
        """Return a human-readable snapshot of timer state and queued events.

        Args:
            n: Maximum number of queued events to include (default: 5).

        The snapshot includes the current simulated time, total queued events,
        and details for the first `n` events in due-time order, without
        changing the underlying queue.
        """
        now = self.clock.now_ms()
        events = sorted(self.heap, key=lambda e: (e[0], e[1]))
        lines = [
            f"SimScheduler @ t = {now}ms",
            f"queued = {len(events)} (showing first {min(n, len(events))})",
        ]
        for i, (when, counter, cb, live) in enumerate(events[:n]):
            cb_name = getattr(cb, "__name__", None)
            cb_desc = cb_name if isinstance(cb_name, str) else repr(cb)
            remaining = max(0, when - now)
            lines.append(
                f"#{i:02d} due @ {when}ms (in {remaining}ms) counter={counter} live={live} cb={cb_desc}"
            )
        return "\n".join(lines)
