"""Session engine. Wires the sync loops together and owns their timers.

Three loops share one event loop:

* the mic activity sampler (fixed cadence),
* the idle checker (fixed cadence, 1 s by default),
* the transcript poller (chained, adaptive interval).

All shared state lives on this object so the loops can be started and torn
down together.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from convsync.config import Settings, settings as default_settings
from convsync.conversations import ConversationRecord, create_conversation
from convsync.sync.activity import ActivityTracker
from convsync.sync.interval import PollInterval
from convsync.sync.poller import TranscriptPoller
from convsync.sync.session import SessionManager
from convsync.sync.state import CaptureGates, IdleClock
from convsync.sync.timers import run_every
from convsync.utils.logging import get_logger

log = get_logger(__name__)


class SyncEngine:
    def __init__(
        self,
        source,
        add_conversation: Callable[[ConversationRecord], None],
        *,
        config: Settings | None = None,
        create: Callable[[str], ConversationRecord] = create_conversation,
        on_mic_activity_change: Callable[[float], None] | None = None,
        on_delete_conversation: Callable[[str], None] | None = None,
        on_update_conversation: Callable[[ConversationRecord], None] | None = None,
        clock: IdleClock | None = None,
    ) -> None:
        cfg = config or default_settings
        self.config = cfg
        self.gates = CaptureGates(audio_enabled=cfg.audio_enabled, sleeping=cfg.sleeping)
        self.clock = clock or IdleClock()
        self.interval = PollInterval(cfg.initial_poll_interval_ms, cfg.max_poll_interval_ms)

        self.session = SessionManager(
            self.clock,
            self.gates,
            cfg.idle_threshold_seconds,
            add_conversation=add_conversation,
            create=create,
            on_delete_conversation=on_delete_conversation,
            on_update_conversation=on_update_conversation,
        )
        self.poller = TranscriptPoller(
            source,
            self.session,
            self.clock,
            self.gates,
            self.interval,
            fetch_timeout_seconds=cfg.fetch_timeout_seconds,
        )
        self.activity = ActivityTracker(
            source,
            self.clock,
            self.gates,
            window_ms=cfg.mic_sample_window_ms,
            threshold=cfg.mic_activity_threshold,
            on_change=on_mic_activity_change,
            fetch_timeout_seconds=cfg.mic_fetch_timeout_seconds,
        )
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def start(self) -> None:
        if self._tasks:
            return
        cfg = self.config
        self.poller.reopen()
        self._tasks = [
            asyncio.create_task(
                run_every(cfg.poll_mic_interval_ms / 1000, self.activity.sample_once, "mic_activity"),
                name="convsync-mic-activity",
            ),
            asyncio.create_task(
                run_every(cfg.idle_check_interval_ms / 1000, self.session.idle_check, "idle_check"),
                name="convsync-idle-check",
            ),
            asyncio.create_task(self.poller.run(), name="convsync-transcript-poller"),
        ]
        log.info(
            "sync_engine_started",
            idle_threshold_seconds=cfg.idle_threshold_seconds,
            poll_interval_ms=self.interval.value_ms,
        )

    async def stop(self) -> None:
        self.poller.close()
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            log.info("sync_engine_stopped")

    # -- caller requests ---------------------------------------------------

    def save(self) -> ConversationRecord | None:
        """Explicit save: flush the buffer even if it is blank."""
        return self.session.flush(force=True)

    def delete_conversation(self, conversation_id: str) -> None:
        self.session.delete_conversation(conversation_id)

    def update_conversation(self, record: ConversationRecord) -> None:
        self.session.update_conversation(record)

    def set_audio_enabled(self, enabled: bool) -> None:
        self.gates.audio_enabled = enabled
        log.info("audio_enabled_changed", audio_enabled=enabled)

    def set_sleeping(self, sleeping: bool) -> None:
        self.gates.sleeping = sleeping
        log.info("sleeping_changed", sleeping=sleeping)

    def current_conversation(self, latest_first: bool = True) -> str:
        return self.session.flatten(chronological=not latest_first)

    def snapshot(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "audio_enabled": self.gates.audio_enabled,
            "sleeping": self.gates.sleeping,
            "poll_interval_ms": round(self.interval.value_ms),
            "poll_in_flight": self.poller.in_flight,
            "mic_activity": self.activity.level,
            "idle_seconds": round(self.clock.idle_seconds(), 2),
            "idle_threshold_seconds": self.session.idle_threshold_seconds,
            "buffer": list(self.session.buffer),
        }
