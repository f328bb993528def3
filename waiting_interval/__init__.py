"""Non-overlapping repeating timers with progressive delays."""

from .errors import ConfigError, InvalidDelaysError, WaitingIntervalError
from .manager import Cycle, IntervalManager
from .progression import DelayProgression, validate_delays
from .protocols import ErrorReporter, Scheduler, SchedulerCancel
from .scheduler import SimClock, SimScheduler

__all__ = [
    "ConfigError",
    "Cycle",
    "DelayProgression",
    "ErrorReporter",
    "IntervalManager",
    "InvalidDelaysError",
    "Scheduler",
    "SchedulerCancel",
    "SimClock",
    "SimScheduler",
    "WaitingIntervalError",
    "validate_delays",
]
