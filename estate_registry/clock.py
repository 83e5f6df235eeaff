"""Logical clocks driving expiry and foreclosure windows."""

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that reports the current logical time in integer ticks."""

    def now(self) -> int: ...


class LogicalClock:
    """Manually driven, monotonically non-decreasing clock."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start must be non-negative")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, ticks: int = 1) -> int:
        """Move the clock forward and return the new time."""
        if ticks < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += ticks
        return self._now

    def set(self, value: int) -> int:
        if value < self._now:
            raise ValueError(f"Clock cannot move backwards ({value} < {self._now})")
        self._now = value
        return self._now


class SystemClock:
    """Wall clock in whole seconds since the epoch.

    Never reports a value lower than one it already returned, so wall clock
    adjustments cannot reopen a closed window.
    """

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, int(time.time()))
        return self._last
