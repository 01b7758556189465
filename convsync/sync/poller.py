"""Adaptive transcript poller.

Each poll fetches the long-window transcript, merges it into the current
session and adjusts the poll interval: productive polls slow polling down,
empty or unproductive polls and fetch errors speed it back up. Polls are
chained, so the next one is only scheduled after the previous one finished.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Protocol

from convsync.sync.interval import PollInterval
from convsync.sync.session import SessionManager
from convsync.sync.state import CaptureGates, IdleClock
from convsync.transcript.merge import is_productive, merge_segments
from convsync.transcript.parser import parse_transcript
from convsync.utils.logging import get_logger

log = get_logger(__name__)


class TranscriptSource(Protocol):
    async def fetch_transcript(self) -> str | None: ...


class PollOutcome(enum.Enum):
    SKIPPED = "skipped"
    PRODUCTIVE = "productive"
    UNPRODUCTIVE = "unproductive"
    EMPTY = "empty"
    ERROR = "error"
    DISCARDED = "discarded"


class TranscriptPoller:
    def __init__(
        self,
        source: TranscriptSource,
        session: SessionManager,
        clock: IdleClock,
        gates: CaptureGates,
        interval: PollInterval,
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        self._source = source
        self._session = session
        self._clock = clock
        self._gates = gates
        self.interval = interval
        self._fetch_timeout = fetch_timeout_seconds
        self._in_flight = False
        self._closed = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def close(self) -> None:
        """Stop applying results; a fetch still pending is discarded."""
        self._closed = True

    def reopen(self) -> None:
        self._closed = False

    async def poll_once(self) -> PollOutcome:
        if self._gates.sleeping or not self._gates.audio_enabled or self._in_flight:
            return PollOutcome.SKIPPED

        self._in_flight = True
        since_last = self._clock.seconds_since_transcript()
        try:
            try:
                transcript = await asyncio.wait_for(
                    self._source.fetch_transcript(), timeout=self._fetch_timeout
                )
            except asyncio.TimeoutError:
                if self._closed:
                    return PollOutcome.DISCARDED
                self.interval.back_off_error()
                log.warning(
                    "transcript_fetch_timeout",
                    timeout_seconds=self._fetch_timeout,
                    interval_ms=round(self.interval.value_ms),
                )
                return PollOutcome.ERROR
            except Exception:
                if self._closed:
                    return PollOutcome.DISCARDED
                self.interval.back_off_error()
                log.exception(
                    "transcript_fetch_failed",
                    seconds_since_last=round(since_last, 2),
                    interval_ms=round(self.interval.value_ms),
                )
                return PollOutcome.ERROR

            if self._closed:
                log.debug("transcript_discarded_after_close")
                return PollOutcome.DISCARDED
            return self._apply(transcript, since_last)
        finally:
            self._in_flight = False

    def _apply(self, transcript: str | None, since_last: float) -> PollOutcome:
        if not transcript:
            self.interval.shrink()
            log.info(
                "transcript_empty",
                seconds_since_last=round(since_last, 2),
                interval_ms=round(self.interval.value_ms),
            )
            return PollOutcome.EMPTY

        log.info(
            "transcript_received",
            seconds_since_last=round(since_last, 2),
            chars=len(transcript),
        )
        existing = self._session.processed_segments
        merged = merge_segments(parse_transcript(transcript), existing)

        if not is_productive(merged, existing):
            self.interval.shrink()
            log.info(
                "transcript_no_new_segments",
                segments=len(existing),
                interval_ms=round(self.interval.value_ms),
            )
            return PollOutcome.UNPRODUCTIVE

        self._session.replace_segments(merged)
        self._clock.mark_transcript()
        self.interval.grow()
        log.info(
            "transcript_merged",
            segments=len(merged),
            added=len(merged) - len(existing),
            interval_ms=round(self.interval.value_ms),
        )
        return PollOutcome.PRODUCTIVE

    async def run(self) -> None:
        """Poll forever, sleeping the current interval before each poll."""
        while not self._closed:
            await asyncio.sleep(self.interval.seconds)
            if self._closed:
                break
            await self.poll_once()
