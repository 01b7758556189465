"""Merge freshly parsed segments into the accumulated conversation.

Consecutive segments from the same speaker collapse into one, and repeated
sentences inside the collapsed text are dropped. Existing segments always
count as earlier than new ones, whatever their timestamps say.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from convsync.transcript.parser import TranscriptSegment


def merge_text(earlier: str, later: str) -> str:
    """Join two texts and drop sentences that already appeared.

    Sentences are split on ``.`` and compared after stripping surrounding
    whitespace; first-seen order is kept.
    """
    combined = f"{earlier} {later}"
    sentences: dict[str, None] = {}
    for fragment in combined.split("."):
        fragment = fragment.strip()
        if fragment:
            sentences.setdefault(fragment)
    return ". ".join(sentences) + "."


def merge_segments(
    new_segments: Sequence[TranscriptSegment],
    existing_segments: Sequence[TranscriptSegment],
) -> list[TranscriptSegment]:
    merged: list[TranscriptSegment] = []
    for segment in [*existing_segments, *new_segments]:
        if merged and merged[-1].speaker == segment.speaker:
            last = merged[-1]
            # The earlier segment keeps its timestamp and speaker.
            merged[-1] = replace(last, text=merge_text(last.text, segment.text))
        else:
            merged.append(segment)
    return merged


def is_productive(
    merged: Sequence[TranscriptSegment],
    existing: Sequence[TranscriptSegment],
) -> bool:
    """A merge is productive only if it added top-level segments.

    Text that merely extends the last speaker's segment does not count, so a
    run of same-speaker updates still lets the poll interval shrink.
    """
    return len(merged) > len(existing)
