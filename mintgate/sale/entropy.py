"""Clock and entropy capabilities injected into the sale.

The default draw index is derived from the current time in nanoseconds.
It is predictable by anyone who knows the call time and is not meant to be
a secure random source.
"""

import time
from typing import Protocol

NS_PER_MS = 1_000_000


class Clock(Protocol):
    def now_ns(self) -> int: ...


class EntropySource(Protocol):
    def next_index(self, bound: int) -> int: ...


class SystemClock:
    """Wall clock."""

    def now_ns(self) -> int:
        return time.time_ns()


class FrozenClock:
    """Clock pinned to a settable instant. Used by the CLI ``--at`` option and tests."""

    def __init__(self, now_ns: int = 0):
        self._now_ns = now_ns

    @classmethod
    def at_ms(cls, ms: int) -> "FrozenClock":
        return cls(ms * NS_PER_MS)

    def now_ns(self) -> int:
        return self._now_ns

    def set_ms(self, ms: int) -> None:
        self._now_ns = ms * NS_PER_MS

    def advance_ms(self, ms: int) -> None:
        self._now_ns += ms * NS_PER_MS


class ClockEntropy:
    """Index source derived from the clock: ``now_ns mod bound``."""

    def __init__(self, clock: Clock):
        self.clock = clock

    def next_index(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return self.clock.now_ns() % bound


def now_ms(clock: Clock) -> int:
    return clock.now_ns() // NS_PER_MS
