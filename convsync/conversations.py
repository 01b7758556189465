"""Finalized conversation records and the caller's in-memory list of them."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from convsync.utils.logging import get_logger

log = get_logger(__name__)

TITLE_MAX_CHARS = 60
UNTITLED = "Untitled conversation"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    title: str = UNTITLED
    created_at: datetime = Field(default_factory=_utcnow)


def make_title(text: str) -> str:
    text = " ".join(text.split())
    if not text:
        return UNTITLED
    if len(text) <= TITLE_MAX_CHARS:
        return text
    return text[: TITLE_MAX_CHARS - 1].rstrip() + "…"


def create_conversation(text: str) -> ConversationRecord:
    return ConversationRecord(text=text, title=make_title(text))


class ConversationStore:
    """Holds finalized conversations for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: dict[str, ConversationRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def get(self, conversation_id: str) -> ConversationRecord | None:
        return self._records.get(conversation_id)

    def add(self, record: ConversationRecord) -> None:
        self._records[record.id] = record
        log.info("conversation_added", conversation_id=record.id, chars=len(record.text))

    def delete(self, conversation_id: str) -> bool:
        if self._records.pop(conversation_id, None) is None:
            return False
        log.info("conversation_deleted", conversation_id=conversation_id)
        return True

    def update(self, record: ConversationRecord) -> bool:
        if record.id not in self._records:
            return False
        self._records[record.id] = record
        log.info("conversation_updated", conversation_id=record.id)
        return True

    def list_all(self) -> list[ConversationRecord]:
        """Return all conversations, newest first."""
        return sorted(self._records.values(), key=lambda r: r.created_at, reverse=True)

    def search(self, query: str) -> list[ConversationRecord]:
        """Case-insensitive substring match over title and text."""
        query = query.strip().lower()
        if not query:
            return self.list_all()
        return [
            r for r in self.list_all()
            if query in r.title.lower() or query in r.text.lower()
        ]
