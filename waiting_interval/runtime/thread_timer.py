"""Thread-backed timer adapter for hosts without an event loop.

Each `call_later` starts a daemon `threading.Timer`. Callbacks of different
cycles can run on different threads at the same time; `IntervalManager`
guards its registry with a lock, and a cycle still never overlaps itself.
"""

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class ThreadTimer:
    def __init__(self, name_prefix: str = "waiting-interval") -> None:
        self.name_prefix = name_prefix
        self._started = 0

    def now_ms(self) -> float:
        return time.monotonic() * 1000

    def call_later(self, ms: float, cb: Callable[[], None]):
        timer = threading.Timer(ms / 1000.0, cb)
        timer.daemon = True
        self._started += 1
        timer.name = f"{self.name_prefix}-{self._started}"
        timer.start()
        logger.debug("Timer %s armed for %sms", timer.name, ms)

        def cancel():
            timer.cancel()

        return cancel
