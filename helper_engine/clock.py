"""
Clock abstractions for deterministic timestamps.

Notes
-----
Failure records are keyed by epoch milliseconds. The error log never reads
wall-clock time directly; it asks a Clock, which keeps tests deterministic.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Protocol


class Clock(Protocol):
    """A source of epoch-millisecond timestamps."""

    def now_ms(self) -> int:
        """
        Return the current time.

        Returns
        -------
        int
            Milliseconds since the Unix epoch.
        """
        ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock backed by the system wall clock."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Clock that always returns the same instant (useful for tests)."""

    fixed_ms: int

    def now_ms(self) -> int:
        return self.fixed_ms


@dataclass(slots=True)
class ManualClock:
    """
    Clock that only moves when told to.

    Attributes
    ----------
    current_ms:
        Value returned by ``now_ms``.
    """

    current_ms: int = 0

    def now_ms(self) -> int:
        return self.current_ms

    def advance(self, delta_ms: int = 1) -> int:
        """
        Move the clock forward.

        Parameters
        ----------
        delta_ms:
            Milliseconds to add. Must not be negative.

        Returns
        -------
        int
            The new current value.
        """
        if delta_ms < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.current_ms += delta_ms
        return self.current_ms
