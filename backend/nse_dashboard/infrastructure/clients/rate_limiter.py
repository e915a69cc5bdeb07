from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import time


class FixedIntervalRateLimiter:
    """Spaces successive acquisitions at least ``interval_seconds`` apart."""

    def __init__(
        self,
        *,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")

        self._interval = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._next_allowed_at: float | None = None

    async def acquire(self) -> None:
        if self._interval <= 0:
            return

        async with self._lock:
            now = self._clock()
            if self._next_allowed_at is not None and now < self._next_allowed_at:
                await self._sleep(self._next_allowed_at - now)
                now = self._clock()
            self._next_allowed_at = now + self._interval
