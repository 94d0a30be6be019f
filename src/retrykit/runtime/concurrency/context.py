"""Cooperative cancellation handles for retried operations.

A Context is handed to every attempt. It becomes done when its parent is
done, when cancel() is called, or when its timeout fires. Operations are
expected to observe it (check(), sleep(), done()); nothing is preempted.

Example:
    >>> root = background()
    >>> with root.with_timeout(5.0) as ctx:
    ...     while not ctx.cancelled:
    ...         poll_once()
    ...         ctx.sleep(0.1)
"""

from __future__ import annotations

import threading
import time
from typing import TYPE_CHECKING

from .sync import Signal
from .wait import aselect

if TYPE_CHECKING:
    from types import TracebackType


class ContextError(Exception):
    """Base for errors reported by a done Context."""

    message = "context error"

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return self.message


class ContextCanceled(ContextError):
    message = "context canceled"


class DeadlineExceeded(ContextError):
    message = "context deadline exceeded"


class Context:
    """Cancellation handle with optional deadline, derived from a parent.

    Attributes:
        deadline: Monotonic time at which the context expires, if any
    """

    __slots__ = ("_done", "_err", "_lock", "_parent", "_timer", "deadline")

    def __init__(self, parent: Context | None = None, timeout: float | None = None) -> None:
        self._done = Signal()
        self._err: ContextError | None = None
        self._lock = threading.Lock()
        self._parent = parent
        self._timer: threading.Timer | None = None

        deadlines = [parent.deadline] if parent is not None and parent.deadline is not None else []
        if timeout is not None:
            deadlines.append(time.monotonic() + timeout)
        self.deadline: float | None = min(deadlines) if deadlines else None

        if parent is not None:
            parent.done().subscribe(self._on_parent_done)
        if timeout is not None and not self._done.is_set():
            self._timer = threading.Timer(max(timeout, 0.0), self._cancel, args=(DeadlineExceeded(),))
            self._timer.daemon = True
            self._timer.start()

    def _on_parent_done(self) -> None:
        assert self._parent is not None
        self._cancel(self._parent.err() or ContextCanceled())

    def _cancel(self, err: ContextError) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        if self._parent is not None:
            self._parent.done().unsubscribe(self._on_parent_done)
        self._done.set()

    def cancel(self) -> None:
        """Cancel this context and its children. Idempotent."""
        self._cancel(ContextCanceled())

    def done(self) -> Signal:
        return self._done

    def err(self) -> ContextError | None:
        """None while live; the reason once done."""
        with self._lock:
            return self._err

    @property
    def cancelled(self) -> bool:
        return self._done.is_set()

    def check(self) -> None:
        """Raise the context's error if it is done."""
        if (err := self.err()) is not None:
            raise err

    def sleep(self, seconds: float) -> None:
        """Sleep, waking early and raising if the context becomes done."""
        if self._done.wait(seconds):
            self.check()

    async def asleep(self, seconds: float) -> None:
        if await aselect(seconds, self._done) is not None:
            self.check()

    def with_cancel(self) -> Context:
        return Context(self)

    def with_timeout(self, seconds: float) -> Context:
        return Context(self, timeout=seconds)

    def __enter__(self) -> Context:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"Context(err={self.err()!r}, deadline={self.deadline!r})"


def background() -> Context:
    """A root context. Never done unless its holder cancels it."""
    return Context()
