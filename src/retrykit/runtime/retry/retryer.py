"""Retryer objects bundling a deadline, a strategy, and options.

Example:
    >>> r = exponential(30.0, with_units(0.1), with_jitter(0.05))
    >>> r.retry(ping)
    >>> r.retry_with_context(ctx, lambda ctx: fetch(ctx, url))

Each call builds a fresh ticker, so one Retryer can serve many sessions.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Callable, Protocol, TypeVar, runtime_checkable

from retrykit.foundation.config import Option, Options, new_default_options
from retrykit.runtime.concurrency import Context

from .backoff import BaseTicker, ConstantTicker, ExponentialTicker, LinearTicker
from .loop import aretry, aretry_with_context, retry, retry_with_context

T = TypeVar("T")


@runtime_checkable
class Retryer(Protocol):
    """Protocol for retrying a function."""

    def retry(self, operation: Callable[[], T]) -> T | None: ...
    def retry_with_context(self, ctx: Context, operation: Callable[[Context], T]) -> T | None: ...


@dataclass(frozen=True, slots=True)
class StrategyRetryer:
    """Retryer running each session with a new ticker of one strategy.

    Attributes:
        duration: Overall session deadline in seconds
        options: Session options
        ticker_type: Strategy instantiated per session
    """

    duration: float
    options: Options
    ticker_type: type[BaseTicker] = ConstantTicker

    def ticker(self) -> BaseTicker:
        return self.ticker_type(self.options)

    def retry(self, operation: Callable[[], T]) -> T | None:
        return retry(operation, self.duration, self.ticker(), self.options)

    def retry_with_context(self, ctx: Context, operation: Callable[[Context], T]) -> T | None:
        return retry_with_context(ctx, operation, self.duration, self.ticker(), self.options)

    async def aretry(self, operation: Callable[[], Awaitable[T]]) -> T | None:
        return await aretry(operation, self.duration, self.ticker(), self.options)

    async def aretry_with_context(self, ctx: Context, operation: Callable[[Context], Awaitable[T]]) -> T | None:
        return await aretry_with_context(ctx, operation, self.duration, self.ticker(), self.options)


def constant(duration: float, *opts: Option) -> StrategyRetryer:
    """Retry at a fixed interval for up to duration seconds."""
    return StrategyRetryer(duration, new_default_options(*opts), ConstantTicker)


def exponential(duration: float, *opts: Option) -> StrategyRetryer:
    """Retry with a doubling interval for up to duration seconds."""
    return StrategyRetryer(duration, new_default_options(*opts), ExponentialTicker)


def linear(duration: float, *opts: Option) -> StrategyRetryer:
    """Retry with a linearly growing interval for up to duration seconds."""
    return StrategyRetryer(duration, new_default_options(*opts), LinearTicker)
