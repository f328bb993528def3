"""Exceptions raised by the waiting-interval scheduler."""


class WaitingIntervalError(Exception):
    """Base class for errors raised by this package."""


class InvalidDelaysError(WaitingIntervalError, ValueError):
    """Raised when a delay sequence is empty or holds an unusable duration.

    Durations must be finite, non-negative real numbers (booleans are
    rejected even though they are ints).
    """


class ConfigError(WaitingIntervalError, ValueError):
    """Raised when runtime settings cannot be parsed from the environment."""
