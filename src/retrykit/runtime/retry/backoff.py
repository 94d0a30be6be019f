"""Tickers: pluggable delay strategies for the retry loop.

Provides successive delays between attempts plus a cooperative stop signal:
- ConstantTicker: Fixed interval
- ExponentialTicker: Interval doubles on every tick
- LinearTicker: Interval grows by one unit on every tick

Every strategy adds a uniformly distributed jitter in [0, options.jitter)
to spread out many callers retrying against the same dependency.

A ticker carries per-session state (tick count, stop signal). Use one
instance per retry session.
"""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from retrykit.foundation.config import Options
from retrykit.runtime.concurrency import Signal


@runtime_checkable
class Ticker(Protocol):
    """Protocol for the retry loop's clock."""

    def tick(self) -> float:
        """Delay in seconds before the next attempt."""
        ...

    def stop_signal(self) -> Signal:
        """Signal that ends the waiting phase (and the session) when fired."""
        ...

    def stop(self) -> None:
        """Fire the stop signal. Never blocks; repeated calls are no-ops."""
        ...


class BaseTicker(ABC):
    """Shared jitter and stop handling for the built-in strategies.

    Args:
        options: Supplies units and jitter bound
        rng: Random source for jitter (default: seeded from wall clock)
    """

    __slots__ = ("options", "_rng", "_stop", "_n")

    def __init__(self, options: Options, rng: random.Random | None = None) -> None:
        self.options = options
        self._rng = rng or random.Random(time.time_ns())
        self._stop = Signal()
        self._n = 0

    def jitter(self) -> float:
        if self.options.jitter == 0:
            return 0.0
        return self._rng.random() * self.options.jitter

    def tick(self) -> float:
        self._n += 1
        return self.interval(self._n) + self.jitter()

    @abstractmethod
    def interval(self, n: int) -> float:
        """Base delay for the n-th tick (1-based), without jitter."""
        ...

    def stop_signal(self) -> Signal:
        return self._stop

    def stop(self) -> None:
        self._stop.set()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(units={self.options.units}, jitter={self.options.jitter})"


class ConstantTicker(BaseTicker):
    """Delay = units + jitter"""

    __slots__ = ()

    def interval(self, n: int) -> float:
        return self.options.units


class ExponentialTicker(BaseTicker):
    """Delay = units * 2^n + jitter"""

    __slots__ = ()

    def interval(self, n: int) -> float:
        return self.options.units * (2 ** n)


class LinearTicker(BaseTicker):
    """Delay = units * n + jitter"""

    __slots__ = ()

    def interval(self, n: int) -> float:
        return self.options.units * n


def new_constant_ticker(options: Options, rng: random.Random | None = None) -> ConstantTicker:
    return ConstantTicker(options, rng)


def new_exponential_ticker(options: Options, rng: random.Random | None = None) -> ExponentialTicker:
    return ExponentialTicker(options, rng)


def new_linear_ticker(options: Options, rng: random.Random | None = None) -> LinearTicker:
    return LinearTicker(options, rng)
