"""Interfaces (Protocols) that decouple the interval manager from timers.

The manager only depends on these minimal abstractions, so the same code runs
on the deterministic simulator, an asyncio event loop or plain threads.
"""

from typing import Protocol, Callable


class SchedulerCancel(Protocol):
    """Callable returned by `Scheduler.call_later` to cancel a pending event.

    Calling it after the event already fired, or calling it twice, must be a
    harmless no-op.
    """

    def __call__(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    """Single-shot deferred execution primitive used to drive cycles."""

    def call_later(self, ms: float, cb: Callable[[], None]) -> SchedulerCancel:
        """Schedule callback `cb` to run once in `ms` milliseconds."""
        raise NotImplementedError

    def now_ms(self) -> float:
        """Return current time in milliseconds for this scheduler domain."""
        raise NotImplementedError


class ErrorReporter(Protocol):
    """Hook told about handler failures; receives the cycle id and exception."""

    def __call__(self, cycle_id: int, exc: BaseException) -> None:
        raise NotImplementedError
