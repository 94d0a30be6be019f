"""Concurrency primitives used by the retry loop.

Key Components:
    - Signal: One-shot, thread-safe notification (never blocks the firer)
    - select/aselect: Wait for the first of several signals or a timeout
    - Context: Cooperative cancellation handle with parent and deadline

Example:
    >>> from retrykit.runtime.concurrency import background, select
    >>>
    >>> with background().with_timeout(2.0) as ctx:
    ...     fired = select(5.0, ctx.done())  # 0 after ~2s
"""

from __future__ import annotations

from .context import Context, ContextCanceled, ContextError, DeadlineExceeded, background
from .sync import Signal
from .wait import aselect, select

__all__ = [
    # Signals
    "Signal", "select", "aselect",
    # Cancellation
    "Context", "background", "ContextError", "ContextCanceled", "DeadlineExceeded",
]
