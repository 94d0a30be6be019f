"""Thread-safe one-shot signal.

A Signal fires at most once. Firing never blocks, so stopping a ticker
after its session has ended (or twice) is harmless. Subscribers are
notified from the firing thread; async waiters bridge through
``loop.call_soon_threadsafe`` (see wait.aselect).
"""

from __future__ import annotations

import threading
from typing import Callable

Callback = Callable[[], object]


class Signal:
    """One-shot, thread-safe notification.

    Example:
        >>> s = Signal()
        >>> s.set()
        True
        >>> s.set()  # already fired
        False
        >>> s.wait(0)
        True
    """

    __slots__ = ("_event", "_lock", "_callbacks")

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callback] = []

    def set(self) -> bool:
        """Fire the signal. Returns False if it had already fired."""
        with self._lock:
            if self._event.is_set():
                return False
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb()
        return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until fired or timeout. Returns whether the signal fired."""
        return self._event.wait(None if timeout is None else max(timeout, 0.0))

    def subscribe(self, callback: Callback) -> None:
        """Run callback when the signal fires (immediately if it already has)."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def unsubscribe(self, callback: Callback) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def __repr__(self) -> str:
        return f"Signal(set={self.is_set()})"
