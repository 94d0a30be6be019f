"""The retry loop.

State Machine:
    ATTEMPTING → success → SUCCEEDED (return value)
    ATTEMPTING → expected error → WAITING
    ATTEMPTING → unexpected/plain error → FAILED (raise ErrorSet)
    WAITING → tick elapsed → ATTEMPTING
    WAITING → ticker stopped → SUCCEEDED (return None)
    WAITING → overall deadline → FAILED (ErrorSet ends with "timeout")
    WAITING → outer context done → FAILED (ErrorSet ends with context error)

Attempts run strictly one after another. Each attempt receives a Context
derived from the caller's, bounded by options.attempt_timeout when set.
The loop never preempts an operation that ignores its context.

Example:
    >>> def ping() -> str:
    ...     try:
    ...         return client.ping()
    ...     except ConnectionError as e:
    ...         raise ExpectedError(e) from e
    >>>
    >>> opts = new_default_options()
    >>> retry(ping, 30.0, new_constant_ticker(opts), opts)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable
from typing import Callable, TypeVar

from retrykit.foundation.config import Options, new_default_options
from retrykit.foundation.errors import TIMEOUT, ErrorKind, ErrorSet, ExpectedError, classify, is_error
from retrykit.runtime.concurrency import Context, ContextCanceled, DeadlineExceeded, aselect, background, select

from .backoff import Ticker, new_constant_ticker

logger = logging.getLogger("retrykit.retry")

T = TypeVar("T")


def _attempt_context(ctx: Context, options: Options) -> Context:
    return ctx.with_timeout(options.attempt_timeout) if options.attempt_timeout > 0 else ctx.with_cancel()


class _Session:
    """State shared by the sync and async loops for one session."""

    __slots__ = ("ctx", "ticker", "options", "deadline", "errs", "attempts")

    def __init__(self, ctx: Context, timeout: float, ticker: Ticker | None, options: Options | None) -> None:
        self.options = options if options is not None else new_default_options()
        self.ticker = ticker if ticker is not None else new_constant_ticker(self.options)
        self.ctx = ctx
        self.deadline = time.monotonic() + timeout
        self.errs = ErrorSet()
        self.attempts = 0

    def record(self, exc: Exception, attempt_ctx: Context) -> bool:
        """Accumulate a failed attempt. Returns whether the session may retry."""
        err: Exception = exc
        kind = classify(exc)
        # Per-attempt deadline while the caller's context is still live
        if (kind is ErrorKind.PLAIN and isinstance(attempt_ctx.err(), DeadlineExceeded)
                and self.ctx.err() is None and is_error(exc, DeadlineExceeded)):
            err, kind = ExpectedError(exc), ErrorKind.EXPECTED

        exists = self.errs.append(err)
        match kind:
            case ErrorKind.EXPECTED:
                if not exists and self.options.log_errors:
                    logger.info("retrying error: %s", err)
                return True
            case _:
                logger.debug("attempt %d failed with %s error: %s", self.attempts, kind, err)
                return False

    def plan_wait(self) -> tuple[float, bool]:
        """Seconds to wait and whether the overall deadline expires first."""
        delay = self.ticker.tick()
        remaining = self.deadline - time.monotonic()
        return (delay, False) if delay < remaining else (max(remaining, 0.0), True)

    def resume(self, fired: int | None, expires: bool) -> bool:
        """Act on the wait outcome. True to attempt again, False when stopped."""
        match fired:
            case 0:
                logger.debug("stopped after %d attempt(s)", self.attempts)
                return False
            case 1:
                self.errs.append(self.ctx.err() or ContextCanceled())
                raise self.errs
        if expires:
            logger.debug("timed out after %d attempt(s)", self.attempts)
            self.errs.append(TIMEOUT)
            raise self.errs
        return True


def retry_with_context(
    ctx: Context,
    operation: Callable[[Context], T],
    timeout: float,
    ticker: Ticker | None = None,
    options: Options | None = None,
) -> T | None:
    """Call operation until it succeeds, fails fatally, times out, or is stopped.

    Args:
        ctx: Caller's cancellation handle; each attempt gets a child of it
        operation: Callable receiving the attempt's Context
        timeout: Overall session deadline in seconds
        ticker: Delay strategy (default: constant ticker from options)
        options: Session options (default: new_default_options())

    Returns:
        The operation's return value, or None if the ticker was stopped

    Raises:
        ErrorSet: Every distinct failure of the session, in order
    """
    session = _Session(ctx, timeout, ticker, options)
    while True:
        session.attempts += 1
        with _attempt_context(ctx, session.options) as attempt_ctx:
            try:
                return operation(attempt_ctx)
            except Exception as exc:
                retrying = session.record(exc, attempt_ctx)
        if not retrying:
            raise session.errs

        wait, expires = session.plan_wait()
        fired = select(wait, session.ticker.stop_signal(), ctx.done())
        if not session.resume(fired, expires):
            return None


def retry(
    operation: Callable[[], T],
    timeout: float,
    ticker: Ticker | None = None,
    options: Options | None = None,
) -> T | None:
    """Context-free retry. See retry_with_context."""
    return retry_with_context(background(), lambda _ctx: operation(), timeout, ticker, options)


async def aretry_with_context(
    ctx: Context,
    operation: Callable[[Context], Awaitable[T]],
    timeout: float,
    ticker: Ticker | None = None,
    options: Options | None = None,
) -> T | None:
    """Async retry_with_context for coroutine operations."""
    session = _Session(ctx, timeout, ticker, options)
    while True:
        session.attempts += 1
        with _attempt_context(ctx, session.options) as attempt_ctx:
            try:
                return await operation(attempt_ctx)
            except Exception as exc:
                retrying = session.record(exc, attempt_ctx)
        if not retrying:
            raise session.errs

        wait, expires = session.plan_wait()
        fired = await aselect(wait, session.ticker.stop_signal(), ctx.done())
        if not session.resume(fired, expires):
            return None


async def aretry(
    operation: Callable[[], Awaitable[T]],
    timeout: float,
    ticker: Ticker | None = None,
    options: Options | None = None,
) -> T | None:
    """Context-free async retry. See retry_with_context."""
    return await aretry_with_context(background(), lambda _ctx: operation(), timeout, ticker, options)
