"""Multi-way waits over signals.

    - select: Block the calling thread until the first signal fires or a timeout
    - aselect: Same contract for coroutines

Both return the index of the signal that fired, or None when the timeout
elapsed first. Already-fired signals win immediately, lowest index first.

Example:
    >>> idx = select(1.0, ticker.stop_signal(), ctx.done())
    >>> if idx is None:
    ...     pass  # tick elapsed
"""

from __future__ import annotations

import asyncio
import threading

from .sync import Signal


def _first_set(signals: tuple[Signal, ...]) -> int | None:
    return next((i for i, s in enumerate(signals) if s.is_set()), None)


def select(timeout: float | None, *signals: Signal) -> int | None:
    """Wait for the first of signals to fire, up to timeout seconds."""
    if (idx := _first_set(signals)) is not None:
        return idx
    if not signals:
        if timeout is None:
            raise ValueError("select() without signals requires a timeout")
        threading.Event().wait(max(timeout, 0.0))
        return None

    wake = threading.Event()
    for s in signals:
        s.subscribe(wake.set)
    try:
        wake.wait(None if timeout is None else max(timeout, 0.0))
    finally:
        for s in signals:
            s.unsubscribe(wake.set)
    return _first_set(signals)


async def aselect(timeout: float | None, *signals: Signal) -> int | None:
    """Async select: wait for the first of signals to fire, up to timeout seconds."""
    if (idx := _first_set(signals)) is not None:
        return idx
    if not signals:
        if timeout is None:
            raise ValueError("aselect() without signals requires a timeout")
        await asyncio.sleep(max(timeout, 0.0))
        return None

    loop = asyncio.get_running_loop()
    woken: asyncio.Future[None] = loop.create_future()

    def resolve() -> None:
        if not woken.done():
            woken.set_result(None)

    def wake() -> None:
        # Signals fire from arbitrary threads
        if not loop.is_closed():
            loop.call_soon_threadsafe(resolve)

    for s in signals:
        s.subscribe(wake)
    try:
        await asyncio.wait_for(woken, None if timeout is None else max(timeout, 0.0))
    except asyncio.TimeoutError:
        pass
    finally:
        for s in signals:
            s.unsubscribe(wake)
    return _first_set(signals)
