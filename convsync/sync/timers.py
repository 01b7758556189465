from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from convsync.utils.logging import get_logger

log = get_logger(__name__)


async def run_every(
    interval_seconds: float,
    tick: Callable[[], Awaitable[object] | object],
    name: str = "timer",
) -> None:
    """Run ``tick`` on a fixed-rate schedule until cancelled.

    Ticks never overlap. A tick that overruns its slot delays the next one and
    missed slots are dropped rather than replayed.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time()
    while True:
        deadline += interval_seconds
        delay = deadline - loop.time()
        if delay < 0:
            deadline = loop.time()
            delay = 0
        await asyncio.sleep(delay)
        try:
            result = tick()
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            log.exception("timer_tick_failed", timer=name)
