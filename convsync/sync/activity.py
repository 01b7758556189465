"""Mic activity sampling."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from convsync.sync.state import CaptureGates, IdleClock
from convsync.utils.logging import get_logger

log = get_logger(__name__)


class ActivitySource(Protocol):
    async def fetch_mic_activity(self, window_ms: int) -> float: ...


class ActivityTracker:
    """Samples the mic level and advances the idle clock on detected speech.

    A failed or timed-out sample is reported as zero activity; the sampling
    loop keeps running.
    """

    def __init__(
        self,
        source: ActivitySource,
        clock: IdleClock,
        gates: CaptureGates,
        window_ms: int = 300,
        threshold: float = 1.0,
        on_change: Callable[[float], None] | None = None,
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        self._source = source
        self._clock = clock
        self._gates = gates
        self.window_ms = window_ms
        self.threshold = threshold
        self._on_change = on_change
        self._fetch_timeout = fetch_timeout_seconds
        self._failing = False
        self.level = 0.0

    def _publish(self, level: float) -> None:
        self.level = level
        if self._on_change is not None:
            self._on_change(level)

    async def sample_once(self) -> float:
        if not self._gates.capturing:
            self._publish(0.0)
            return 0.0

        try:
            level = await asyncio.wait_for(
                self._source.fetch_mic_activity(self.window_ms),
                timeout=self._fetch_timeout,
            )
        except Exception as exc:
            # Log once per failure streak; the sampler runs many times a second.
            if not self._failing:
                log.warning("mic_sample_failed", error=repr(exc))
            self._failing = True
            self._publish(0.0)
            return 0.0

        if self._failing:
            log.info("mic_sample_recovered")
            self._failing = False

        level = max(float(level), 0.0)
        self._publish(level)
        if level > self.threshold:
            self._clock.touch()
        return level
