"""Deduplicating error accumulator for one retry session."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from .errors import is_error, is_timeout


class ErrorSet(Exception):
    """Ordered set of distinct errors, keyed by message.

    Raised by the retry loop when a session fails. The rendered form is a
    stable contract that callers may match against:

        2 error(s) occurred:
            test
            timeout

    Safe for concurrent use; every read and write holds the lock.

    Example:
        >>> errs = ErrorSet()
        >>> errs.append(ValueError("boom"))
        False
        >>> errs.append(ValueError("boom"))
        True
        >>> str(errs)
        '1 error(s) occurred:\\n\\tboom'
    """

    def __init__(self, *errors: BaseException) -> None:
        super().__init__()
        self._errs: list[BaseException] = []
        self._lock = threading.Lock()
        for err in errors:
            self.append(err)

    def append(self, err: BaseException) -> bool:
        """Add err unless one with the same message exists. Returns True if it was already present."""
        message = str(err)
        with self._lock:
            if any(str(existing) == message for existing in self._errs):
                return True
            self._errs.append(err)
            return False

    def matches(self, target: BaseException | type[BaseException]) -> bool:
        """True iff the set holds exactly one error and it unwraps to target."""
        with self._lock:
            return len(self._errs) == 1 and is_error(self._errs[0], target)

    @property
    def errors(self) -> tuple[BaseException, ...]:
        """Snapshot of accumulated errors in insertion order."""
        with self._lock:
            return tuple(self._errs)

    @property
    def last(self) -> BaseException | None:
        with self._lock:
            return self._errs[-1] if self._errs else None

    @property
    def timed_out(self) -> bool:
        """Whether the session ended on its overall deadline."""
        with self._lock:
            return any(is_timeout(e) for e in self._errs)

    def __reduce__(self) -> tuple[type[ErrorSet], tuple[BaseException, ...]]:
        # Copies and unpickled sets get their own list and lock
        return (type(self), self.errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errs)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __str__(self) -> str:
        with self._lock:
            if not self._errs:
                return ""
            lines = [f"{len(self._errs)} error(s) occurred:"]
            lines.extend(f"\n\t{e}" for e in self._errs)
        return "".join(lines)

    def __repr__(self) -> str:
        return f"ErrorSet({', '.join(repr(e) for e in self.errors)})"
