"""Asyncio-backed timer adapter exposing `now_ms` and `call_later`."""

import asyncio
from typing import Callable, Optional


class LoopTimer:
    """Adapter over an asyncio event loop.

    Without an explicit `loop`, the running loop is looked up on each call, so
    the timer must be used from inside a coroutine or loop callback.
    Callbacks run on the loop thread, one at a time.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop if self._loop is not None else asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self.loop.time() * 1000

    def call_later(self, ms: float, cb: Callable[[], None]):
        handle = self.loop.call_later(ms / 1000.0, cb)

        def cancel():
            handle.cancel()

        return cancel
