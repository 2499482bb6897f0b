"""Time source used by the waiter.

The waiter never calls ``time`` or ``asyncio.sleep`` directly; it goes
through a Clock so schedules can be driven by a virtual clock in tests.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float: ...

    async def sleep(self, seconds: float) -> None: ...


class MonotonicClock:
    """Clock backed by the running event loop's monotonic time."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
