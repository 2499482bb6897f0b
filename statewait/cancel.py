"""External cancellation for wait calls.

A CancelToken can be shared by several wait calls and cancelled from any
thread, including one that is not running an event loop. Waiters check it
between probes and wake up from their pauses as soon as it is cancelled;
a probe already in flight is always allowed to finish.
"""

from __future__ import annotations

import asyncio
import threading
from contextlib import suppress


class CancelToken:
    """Thread-safe, one-shot cancellation signal."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reason: str | None = None
        self._waiters: set[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = set()

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation. Later calls keep the first reason."""
        with self._lock:
            if self._reason is not None:
                return
            self._reason = reason
            waiters = list(self._waiters)

        for loop, future in waiters:
            if loop.is_closed():
                continue
            # the loop may close after the check
            with suppress(RuntimeError):
                loop.call_soon_threadsafe(_resolve, future)

    async def wait(self) -> None:
        """Return once the token is cancelled."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()
        entry = (loop, future)

        with self._lock:
            if self._reason is not None:
                return
            self._waiters.add(entry)

        try:
            await future
        finally:
            with self._lock:
                self._waiters.discard(entry)

    def __repr__(self) -> str:
        state = f"cancelled={self._reason!r}" if self.cancelled else "active"
        return f"CancelToken({state})"


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)
