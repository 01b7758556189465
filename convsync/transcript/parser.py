"""Parse raw transcript text into speaker-attributed segments.

Each line of a transcript has the form ``<timestamp> - <speaker>: <text>``.
"""

from __future__ import annotations

from dataclasses import dataclass

from convsync.utils.logging import get_logger

log = get_logger(__name__)

TIMESTAMP_SEPARATOR = " - "
SPEAKER_SEPARATOR = ": "


@dataclass(frozen=True)
class TranscriptSegment:
    timestamp: str
    speaker: str
    text: str


def parse_line(line: str) -> TranscriptSegment | None:
    """Parse a single transcript line, or return None if a separator is missing."""
    timestamp, sep, rest = line.partition(TIMESTAMP_SEPARATOR)
    if not sep:
        return None
    speaker, sep, text = rest.partition(SPEAKER_SEPARATOR)
    if not sep:
        return None
    return TranscriptSegment(timestamp=timestamp, speaker=speaker, text=text)


def parse_transcript(raw: str) -> list[TranscriptSegment]:
    """Convert a raw transcript into segments, one per non-empty line.

    Malformed lines are skipped so one bad line never discards the rest of the
    transcript.
    """
    segments: list[TranscriptSegment] = []
    for lineno, line in enumerate(raw.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        segment = parse_line(line)
        if segment is None:
            log.warning("transcript_line_malformed", lineno=lineno, line=line[:80])
            continue
        segments.append(segment)
    return segments


def format_segment(segment: TranscriptSegment) -> str:
    return f"{segment.speaker}: {segment.text}"
