"""Clock: Injectable time sources for cache freshness checks."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in seconds."""

    def now(self) -> float: ...


class SystemClock:
    """Monotonic process clock, unaffected by wall-clock adjustments."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to.

    .. code-block:: python

        >>> clock = ManualClock(100.0)
        >>> clock.advance(5)
        >>> clock.now()
        105.0
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward.

        :param seconds: Seconds to advance (must not be negative).
        :raises ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += seconds
