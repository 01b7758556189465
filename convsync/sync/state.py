"""Shared mutable state read and written by the sync loops."""

from __future__ import annotations

import time
from collections.abc import Callable


class IdleClock:
    """Tracks when speech was last seen.

    ``last_activity`` is advanced by mic activity and by productive transcript
    merges, and reset by the idle checker. ``last_transcript`` only moves on
    productive merges.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic) -> None:
        self._now = now
        start = now()
        self.last_activity = start
        self.last_transcript = start

    def touch(self) -> None:
        self.last_activity = self._now()

    def mark_transcript(self) -> None:
        at = self._now()
        self.last_activity = at
        self.last_transcript = at

    def idle_seconds(self) -> float:
        return self._now() - self.last_activity

    def seconds_since_transcript(self) -> float:
        return self._now() - self.last_transcript


class CaptureGates:
    """Externally controlled switches that pause every loop."""

    def __init__(self, audio_enabled: bool = True, sleeping: bool = False) -> None:
        self.audio_enabled = audio_enabled
        self.sleeping = sleeping

    @property
    def capturing(self) -> bool:
        return self.audio_enabled and not self.sleeping
