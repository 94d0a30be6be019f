"""Error classification for retried operations.

Operations tag their failures so the retry loop knows what to do next:
- ExpectedError: transient, safe to retry
- UnexpectedError: fatal, abort the session
- RetryTimeout: synthetic, appended by the loop when the deadline elapses

Anything raised without a tag classifies as PLAIN, which the loop treats
like UNEXPECTED. Unknown failures are never retried.

Example:
    >>> def fetch() -> bytes:
    ...     try:
    ...         return client.get("/health")
    ...     except ConnectionError as e:
    ...         raise ExpectedError(e) from e
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Closed set of failure variants the retry loop dispatches on."""
    EXPECTED = "expected"
    UNEXPECTED = "unexpected"
    TIMEOUT = "timeout"
    PLAIN = "plain"


class ClassifiedError(Exception):
    """Wraps an underlying error with a retry classification.

    Renders exactly as the wrapped error and unwraps to it, so message
    deduplication and identity checks see through the tag.

    Attributes:
        cause: The wrapped error
        kind: Classification tag
        retryable: Whether the loop may try again
    """

    kind: ClassVar[ErrorKind]
    retryable: ClassVar[bool] = False

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return str(self.cause)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cause!r})"


class ExpectedError(ClassifiedError):
    """Error the operation expects; the session keeps retrying."""
    kind = ErrorKind.EXPECTED
    retryable = True


class UnexpectedError(ClassifiedError):
    """Error the operation did not expect; the session ends."""
    kind = ErrorKind.UNEXPECTED


class RetryTimeout(Exception):
    """Overall session deadline exceeded. Carries no cause."""

    kind: ClassVar[ErrorKind] = ErrorKind.TIMEOUT

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return "timeout"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RetryTimeout)

    def __hash__(self) -> int:
        return hash(RetryTimeout)


TIMEOUT = RetryTimeout()


def expected(err: BaseException | None) -> ExpectedError | None:
    """Tag err as expected. None stays None."""
    return None if err is None else ExpectedError(err)


def unexpected(err: BaseException | None) -> UnexpectedError | None:
    """Tag err as unexpected. None stays None."""
    return None if err is None else UnexpectedError(err)


def is_timeout(err: BaseException | None) -> bool:
    return isinstance(err, RetryTimeout)


def classify(err: BaseException) -> ErrorKind:
    """Variant tag of err; untagged errors are PLAIN."""
    kind = getattr(type(err), "kind", None)
    return kind if isinstance(kind, ErrorKind) else ErrorKind.PLAIN


def unwrap(err: BaseException) -> BaseException | None:
    """Next link in the wrap chain, or None at the end."""
    return err.cause if isinstance(err, ClassifiedError) else err.__cause__


def is_error(err: BaseException | None, target: BaseException | type[BaseException]) -> bool:
    """Whether any link in err's wrap chain matches target.

    A link matches when it is target, when target is an exception class
    and the link is an instance of it, or when the link's own
    ``matches(target)`` says so.
    """
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if err is target:
            return True
        if isinstance(target, type) and isinstance(err, target):
            return True
        if (matcher := getattr(err, "matches", None)) is not None and callable(matcher) and matcher(target):
            return True
        err = unwrap(err)
    return False
