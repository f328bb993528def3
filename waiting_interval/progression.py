"""Delay progressions: walk a sequence of durations, then freeze on the last.

    >>> p = DelayProgression([1000, 2000, 3000])
    >>> [next(p) for _ in range(5)]
    [1000, 2000, 3000, 3000, 3000]
"""

import math
from numbers import Real
from typing import Sequence, Tuple

from .errors import InvalidDelaysError


def validate_delays(delays: Sequence[float]) -> Tuple[float, ...]:
    """Return `delays` as a tuple snapshot, raising on unusable input.

    The caller's object is only read, never consumed or modified, so one-shot
    iterators (generators, `iter(...)`) are rejected.
    """
    if isinstance(delays, (str, bytes)):
        raise InvalidDelaysError(f"delays must be a sequence of numbers, got {delays!r}")
    try:
        one_shot = iter(delays) is delays
    except TypeError:
        raise InvalidDelaysError(
            f"delays must be a sequence of numbers, got {type(delays).__name__}"
        ) from None
    if one_shot:
        raise InvalidDelaysError(
            f"delays must be a re-iterable sequence, got iterator {type(delays).__name__}"
        )
    snapshot = tuple(delays)
    if not snapshot:
        raise InvalidDelaysError("delays must contain at least one duration")
    for i, d in enumerate(snapshot):
        if isinstance(d, bool) or not isinstance(d, Real):
            raise InvalidDelaysError(f"delay #{i} is not a number: {d!r}")
        if not math.isfinite(d) or d < 0:
            raise InvalidDelaysError(f"delay #{i} must be finite and >= 0, got {d!r}")
    return snapshot


class DelayProgression:
    """Infinite iterator over a delay sequence that repeats its final value.

    The cursor counts how many values were handed out, pinned at
    ``len(delays)`` once the sequence is exhausted.
    """

    def __init__(self, delays: Sequence[float]) -> None:
        self._delays = validate_delays(delays)
        self._cursor = 0

    @property
    def delays(self) -> Tuple[float, ...]:
        return self._delays

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        """True once every element was returned at least once."""
        return self._cursor >= len(self._delays)

    def peek(self) -> float:
        """Return what the next query would return without advancing."""
        if self.exhausted:
            return self._delays[-1]
        return self._delays[self._cursor]

    def next_delay(self) -> float:
        delay = self.peek()
        if not self.exhausted:
            self._cursor += 1
        return delay

    def __iter__(self) -> "DelayProgression":
        return self

    def __next__(self) -> float:
        return self.next_delay()

    def __repr__(self) -> str:
        return f"DelayProgression(delays={self._delays!r}, cursor={self._cursor})"
