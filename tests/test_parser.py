"""Tests for transcript parsing."""

from convsync.transcript.parser import TranscriptSegment, format_segment, parse_line, parse_transcript


def test_parse_two_speakers():
    segments = parse_transcript("00:01 - Alice: Hi there.\n00:02 - Bob: Hello.")
    assert segments == [
        TranscriptSegment(timestamp="00:01", speaker="Alice", text="Hi there."),
        TranscriptSegment(timestamp="00:02", speaker="Bob", text="Hello."),
    ]


def test_blank_lines_are_ignored():
    segments = parse_transcript("\n00:01 - Alice: one\n\n   \n00:02 - Alice: two\n")
    assert [s.text for s in segments] == ["one", "two"]


def test_separators_split_only_once():
    """Later ' - ' and ': ' belong to the text."""
    segment = parse_line("10:00:01 - Carol: note: ratio is 3 - 2")
    assert segment == TranscriptSegment(
        timestamp="10:00:01", speaker="Carol", text="note: ratio is 3 - 2"
    )


def test_malformed_lines_are_skipped():
    raw = "no separators here\n00:01 - missing speaker separator\n00:02 - Bob: fine"
    segments = parse_transcript(raw)
    assert len(segments) == 1
    assert segments[0].speaker == "Bob"


def test_timestamp_is_not_validated():
    segments = parse_transcript("yesterday-ish - Dan: ok")
    assert segments[0].timestamp == "yesterday-ish"


def test_crlf_line_endings():
    segments = parse_transcript("00:01 - Alice: a\r\n00:02 - Bob: b\r\n")
    assert [s.text for s in segments] == ["a", "b"]


def test_format_segment():
    assert format_segment(TranscriptSegment("00:01", "Alice", "Hi.")) == "Alice: Hi."
