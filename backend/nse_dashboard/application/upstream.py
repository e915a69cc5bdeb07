from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from nse_dashboard.domain.errors import UpstreamDeadlineExceededError

T = TypeVar("T")


async def run_with_deadline(call: Awaitable[T], *, deadline_seconds: float) -> T:
    """Bound the whole bootstrap and fetch sequence, pacing sleeps included."""
    try:
        return await asyncio.wait_for(call, timeout=deadline_seconds)
    except asyncio.TimeoutError as exc:
        raise UpstreamDeadlineExceededError(deadline_seconds=deadline_seconds) from exc
