"""Interval manager: repeating timers that never overlap and slow down.

`IntervalManager.start` behaves like a repeating interval, with two changes:

- the next firing is armed only after the handler returned, so two
  invocations of the same cycle never overlap;
- the wait before each firing comes from a `DelayProgression`, so the
  interval can grow (e.g. 500ms, 1s, 2s, 2s, ...) instead of being fixed.

Every cycle owns exactly one pending timer at a time. Its cancel handle is
kept in the registry so `stop` can always reach the current one.

Handler failures are reported through `on_error` (logged by default). The
cycle is then re-armed, or torn down when `stop_on_error` is set.
"""

import asyncio
import functools
import inspect
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from .errors import WaitingIntervalError
from .progression import DelayProgression
from .protocols import ErrorReporter, Scheduler, SchedulerCancel

logger = logging.getLogger(__name__)


def handler_state(handler: Callable[..., Any]) -> Optional[Dict[str, Any]]:
    """Surface `brief_state()` from a handler object or its bound owner."""
    owner = handler if hasattr(handler, "brief_state") else getattr(handler, "__self__", None)
    if owner is not None and hasattr(owner, "brief_state"):
        return owner.brief_state()
    return None


@dataclass
class Cycle:
    """
    Bookkeeping for one repeating schedule created by `IntervalManager.start`.

    Attributes
    ----------
    cycle_id:
        Identifier returned to the caller; unique within the manager.
    handler / args:
        Callback and the positional arguments passed to it on every firing.
    progression:
        Source of the wait before each firing.
    cancel:
        Cancel handle of the outstanding timer, or `None` while a firing is
        in progress.
    current_delay:
        Delay (ms) the outstanding timer was armed with.
    """

    cycle_id: int
    handler: Callable[..., Any]
    args: Tuple[Any, ...]
    progression: DelayProgression
    cancel: Optional[SchedulerCancel] = field(default=None, repr=False)
    current_delay: Optional[float] = None
    firings: int = 0
    failures: int = 0
    running: bool = False

    def brief_state(self) -> Dict[str, Any]:
        state = {
            "id": self.cycle_id,
            "handler": getattr(self.handler, "__qualname__", type(self.handler).__name__),
            "firings": self.firings,
            "failures": self.failures,
            "running": self.running,
            "current_delay_ms": self.current_delay,
            "next_delay_ms": self.progression.peek(),
            "delays_ms": list(self.progression.delays),
        }
        extra = handler_state(self.handler)
        if extra is not None:
            state["handler_state"] = extra
        return state


class IntervalManager:
    """Registry of active cycles driven by a `Scheduler`.

    Parameters:
    - scheduler: timer primitive (`SimScheduler`, `LoopTimer`, `ThreadTimer`).
    - on_error: called with ``(cycle_id, exc)`` when a handler raises. Defaults
      to logging the exception.
    - stop_on_error: stop the cycle after a failure instead of re-arming it.
    - await_completion: when a handler returns an awaitable, wait for it to
      finish before re-arming. Otherwise the awaitable is scheduled on the
      running event loop and the cycle is re-armed right away.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_error: Optional[ErrorReporter] = None,
        stop_on_error: bool = False,
        await_completion: bool = False,
    ):
        self.scheduler = scheduler
        self.on_error = on_error if on_error is not None else self._log_failure
        self.stop_on_error = stop_on_error
        self.await_completion = await_completion
        self._cycles: Dict[int, Cycle] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._background: Set["asyncio.Future[Any]"] = set()

    # Public API
    def start(self, handler: Callable[..., Any], delays: Sequence[float], *args: Any) -> int:
        """Start a cycle calling `handler(*args)` after each delay; return its id."""
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {handler!r}")
        progression = DelayProgression(delays)
        with self._lock:
            cycle = Cycle(cycle_id=next(self._ids), handler=handler, args=args, progression=progression)
            self._cycles[cycle.cycle_id] = cycle
            try:
                self._arm(cycle)
            except BaseException:
                self._cycles.pop(cycle.cycle_id, None)
                raise
        logger.debug(
            "Started cycle %s with delays %s (first in %sms)",
            cycle.cycle_id,
            list(progression.delays),
            cycle.current_delay,
        )
        return cycle.cycle_id

    def stop(self, cycle_id: Any) -> bool:
        """Cancel the pending timer of `cycle_id` and forget the cycle.

        Returns False for unknown or already stopped ids. An invocation that
        is running right now finishes, but is not re-armed.
        """
        with self._lock:
            try:
                cycle = self._cycles.pop(cycle_id, None)
            except TypeError:
                return False
            if cycle is None:
                return False
            cancel, cycle.cancel = cycle.cancel, None
            if cancel is not None:
                cancel()
        logger.debug("Stopped cycle %s after %s firings", cycle_id, cycle.firings)
        return True

    def stop_all(self) -> int:
        """Stop every active cycle; return how many were stopped."""
        return sum(1 for cycle_id in self.active_ids() if self.stop(cycle_id))

    def active_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._cycles)

    def get(self, cycle_id: Any) -> Optional[Cycle]:
        with self._lock:
            try:
                return self._cycles.get(cycle_id)
            except TypeError:
                return None

    def brief_state(self) -> Dict[str, Any]:
        with self._lock:
            cycles = [self._cycles[cid].brief_state() for cid in sorted(self._cycles)]
        return {"active": len(cycles), "cycles": cycles}

    def __contains__(self, cycle_id: Any) -> bool:
        return self.get(cycle_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._cycles)

    # Firing
    def _arm(self, cycle: Cycle) -> None:
        # Caller holds the lock.
        delay = cycle.progression.next_delay()
        cycle.current_delay = delay
        cycle.running = False
        cycle.cancel = self.scheduler.call_later(delay, functools.partial(self._fire, cycle.cycle_id))

    def _rearm(self, cycle: Cycle) -> None:
        with self._lock:
            if self._cycles.get(cycle.cycle_id) is not cycle:
                return
            self._arm(cycle)
        logger.debug("Re-armed cycle %s in %sms", cycle.cycle_id, cycle.current_delay)

    def _fire(self, cycle_id: int) -> None:
        with self._lock:
            cycle = self._cycles.get(cycle_id)
            if cycle is None or cycle.running:
                return
            cycle.cancel = None
            cycle.running = True
            cycle.firings += 1

        future = None
        try:
            result = cycle.handler(*cycle.args)
            if inspect.isawaitable(result):
                future = self._schedule_awaitable(cycle, result)
        except Exception as exc:
            if self._failed(cycle, exc):
                return
        except BaseException:
            # KeyboardInterrupt and friends end the cycle on their way out.
            self.stop(cycle.cycle_id)
            raise
        else:
            if future is not None:
                if self.await_completion:
                    future.add_done_callback(functools.partial(self._completed, cycle))
                    return
                self._background.add(future)
                future.add_done_callback(functools.partial(self._background_done, cycle))
        self._rearm(cycle)

    @staticmethod
    def _schedule_awaitable(cycle: Cycle, result: Any) -> "asyncio.Future[Any]":
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            raise WaitingIntervalError(
                f"handler of cycle {cycle.cycle_id} returned an awaitable but no event loop is running"
            ) from None
        return asyncio.ensure_future(result, loop=loop)

    def _completed(self, cycle: Cycle, future: "asyncio.Future[Any]") -> None:
        if future.cancelled():
            # Usually the event loop shutting down; there is nothing to re-arm on.
            logger.debug("Awaitable of cycle %s was cancelled, stopping it", cycle.cycle_id)
            self.stop(cycle.cycle_id)
            return
        if future.exception() is not None:
            if self._failed(cycle, future.exception()):
                return
        self._rearm(cycle)

    def _background_done(self, cycle: Cycle, future: "asyncio.Future[Any]") -> None:
        self._background.discard(future)
        if not future.cancelled() and future.exception() is not None:
            self._failed(cycle, future.exception())

    # Errors
    def _failed(self, cycle: Cycle, exc: BaseException) -> bool:
        """Report a handler failure; return True if the cycle was stopped."""
        cycle.failures += 1
        try:
            self.on_error(cycle.cycle_id, exc)
        except Exception:
            logger.exception("Error reporter failed for cycle %s", cycle.cycle_id)
        if self.stop_on_error:
            self.stop(cycle.cycle_id)
            return True
        return False

    @staticmethod
    def _log_failure(cycle_id: int, exc: BaseException) -> None:
        logger.error("Handler of cycle %s raised %r", cycle_id, exc, exc_info=exc)
