from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
import time

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NseSession:
    cookie: str
    acquired_at: float


class NseSessionCache:
    """One shared NSE session with a TTL.

    Refreshes are serialized so concurrent callers reuse a single handshake.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be greater than 0")

        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._session: NseSession | None = None

    @property
    def current(self) -> NseSession | None:
        session = self._session
        if session is None or self._is_expired(session):
            return None
        return session

    async def get(self, acquire: Callable[[], Awaitable[NseSession]]) -> NseSession:
        cached = self.current
        if cached is not None:
            return cached

        async with self._lock:
            cached = self.current
            if cached is not None:
                return cached

            session = await acquire()
            self._session = session
            logger.debug("Cached new NSE session (%d cookie bytes)", len(session.cookie))
            return session

    def invalidate(self, session: NseSession | None = None) -> None:
        """Drop the cached session; with ``session``, only if it is still the cached one."""
        if self._session is None:
            return
        if session is not None and self._session is not session:
            return
        logger.debug("Invalidating cached NSE session")
        self._session = None

    def _is_expired(self, session: NseSession) -> bool:
        return self._clock() - session.acquired_at >= self._ttl
