"""Retrykit - generic retry engine for fallible operations.

Re-invokes an operation on a pluggable ticker until it succeeds, fails
with an error not marked as expected, runs past an overall deadline, or
the ticker is stopped. Every distinct failure is kept in an ErrorSet.

Quick Start:
    >>> from retrykit import ExpectedError, new_constant_ticker, new_default_options, retry
    >>>
    >>> def ping() -> str:
    ...     try:
    ...         return client.ping()
    ...     except ConnectionError as e:
    ...         raise ExpectedError(e) from e   # retry this one
    >>>
    >>> opts = new_default_options()
    >>> retry(ping, 30.0, new_constant_ticker(opts), opts)

With Cancellation:
    >>> from retrykit import background, retry_with_context, with_attempt_timeout
    >>>
    >>> opts = new_default_options(with_attempt_timeout(2.0))
    >>> with background().with_cancel() as ctx:
    ...     retry_with_context(ctx, lambda c: fetch(c, url), 30.0, new_constant_ticker(opts), opts)

Failure:
    >>> try:
    ...     retry(lambda: 1 / 0, 5.0)
    ... except ErrorSet as errs:
    ...     print(errs)
    1 error(s) occurred:
        division by zero
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    TIMEOUT,
    ClassifiedError,
    ErrorKind,
    ErrorSet,
    ExpectedError,
    RetryTimeout,
    UnexpectedError,
    classify,
    expected,
    is_error,
    is_timeout,
    unexpected,
)

# Config
from .foundation.config import (
    Option,
    Options,
    RetrySettings,
    get_settings,
    new_default_options,
    with_attempt_timeout,
    with_error_logging,
    with_jitter,
    with_units,
)

# Concurrency
from .runtime.concurrency import Context, ContextCanceled, ContextError, DeadlineExceeded, Signal, background

# Retry
from .runtime.retry import (
    ConstantTicker,
    ExponentialTicker,
    LinearTicker,
    Retryer,
    Ticker,
    aretry,
    aretry_with_context,
    constant,
    exponential,
    linear,
    new_constant_ticker,
    new_exponential_ticker,
    new_linear_ticker,
    retry,
    retry_with_context,
)

__all__ = [
    # Errors
    "ErrorKind", "ClassifiedError", "ExpectedError", "UnexpectedError", "RetryTimeout", "TIMEOUT",
    "expected", "unexpected", "is_timeout", "classify", "is_error", "ErrorSet",
    # Config
    "Options", "Option", "new_default_options", "with_units", "with_jitter",
    "with_attempt_timeout", "with_error_logging", "RetrySettings", "get_settings",
    # Concurrency
    "Context", "background", "Signal", "ContextError", "ContextCanceled", "DeadlineExceeded",
    # Retry
    "Ticker", "ConstantTicker", "ExponentialTicker", "LinearTicker",
    "new_constant_ticker", "new_exponential_ticker", "new_linear_ticker",
    "retry", "retry_with_context", "aretry", "aretry_with_context",
    "Retryer", "constant", "exponential", "linear",
]
