"""Error classification and aggregation for retry sessions.

- ErrorKind: Closed set of variants (expected, unexpected, timeout, plain)
- ExpectedError/UnexpectedError: Classification wrappers
- RetryTimeout/TIMEOUT: Overall deadline sentinel
- ErrorSet: Deduplicating, lock-guarded accumulator raised on failure
"""

from .errors import (
    TIMEOUT,
    ClassifiedError,
    ErrorKind,
    ExpectedError,
    RetryTimeout,
    UnexpectedError,
    classify,
    expected,
    is_error,
    is_timeout,
    unexpected,
    unwrap,
)
from .errorset import ErrorSet

__all__ = [
    # Classification
    "ErrorKind", "ClassifiedError", "ExpectedError", "UnexpectedError",
    "expected", "unexpected", "classify",
    # Timeout sentinel
    "RetryTimeout", "TIMEOUT", "is_timeout",
    # Wrap chain
    "unwrap", "is_error",
    # Aggregation
    "ErrorSet",
]
