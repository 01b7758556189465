"""In-progress conversation buffer and idle-driven session cuts."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from convsync.conversations import ConversationRecord, create_conversation
from convsync.sync.state import CaptureGates, IdleClock
from convsync.transcript.parser import TranscriptSegment, format_segment
from convsync.utils.logging import get_logger

log = get_logger(__name__)


def _noop(*args) -> None:
    return None


class SessionManager:
    """Owns the merged segments of the current conversation and flushes them.

    ``buffer`` holds one rendered ``"speaker: text"`` line per merged segment,
    oldest first. It is always rebuilt from ``processed_segments``.
    """

    def __init__(
        self,
        clock: IdleClock,
        gates: CaptureGates,
        idle_threshold_seconds: float,
        add_conversation: Callable[[ConversationRecord], None],
        create: Callable[[str], ConversationRecord] = create_conversation,
        on_delete_conversation: Callable[[str], None] | None = None,
        on_update_conversation: Callable[[ConversationRecord], None] | None = None,
    ) -> None:
        self._clock = clock
        self._gates = gates
        self.idle_threshold_seconds = idle_threshold_seconds
        self._add_conversation = add_conversation
        self._create = create
        self._on_delete = on_delete_conversation or _noop
        self._on_update = on_update_conversation or _noop
        self.processed_segments: list[TranscriptSegment] = []
        self.buffer: list[str] = []

    def replace_segments(self, merged: Sequence[TranscriptSegment]) -> None:
        self.processed_segments = list(merged)
        self.buffer = [format_segment(s) for s in self.processed_segments]

    def flatten(self, chronological: bool = True) -> str:
        parts = self.buffer if chronological else reversed(self.buffer)
        return " ".join(parts)

    def clear(self) -> None:
        self.processed_segments = []
        self.buffer = []

    def flush(self, force: bool = False) -> ConversationRecord | None:
        """Finalize the buffer into a conversation record.

        Without ``force`` a blank buffer is left alone and None is returned.
        """
        text = self.flatten(chronological=True)
        if not force and not text.strip():
            return None
        record = self._create(text)
        self._add_conversation(record)
        self.clear()
        log.info(
            "conversation_flushed",
            conversation_id=record.id,
            forced=force,
            chars=len(text),
        )
        return record

    def idle_check(self) -> bool:
        """Flush if the idle clock shows a long enough silence.

        The clock is reset whenever the threshold is crossed, even if there was
        nothing to flush, so the check does not fire again on the next tick.
        """
        if self._gates.sleeping:
            return False
        idle = self._clock.idle_seconds()
        if idle < self.idle_threshold_seconds:
            return False
        log.debug("idle_threshold_reached", idle_seconds=round(idle, 2))
        self.flush(force=False)
        self._clock.touch()
        return True

    def delete_conversation(self, conversation_id: str) -> None:
        self._on_delete(conversation_id)

    def update_conversation(self, record: ConversationRecord) -> None:
        self._on_update(record)
