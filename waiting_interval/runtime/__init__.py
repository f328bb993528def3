"""Timer adapters and the HTTP runtime for real (non-simulated) runs."""

from .loop_timer import LoopTimer
from .thread_timer import ThreadTimer

__all__ = [
    "LoopTimer",
    "ThreadTimer",
]
