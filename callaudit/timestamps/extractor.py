"""
callaudit/timestamps/extractor.py
==================================
Timestamp Extractor — CallAudit

Responsibility:
    - Scan narrative text for embedded [M:SS] / [MM:SS] markers
    - Resolve each marker to a 0-based offset in seconds
    - Return plain-text runs and markers as an ordered segment list that
      reproduces the input exactly when rendered back

Marker grammar:
    "[" + 1–2 digits (minutes) + ":" + exactly 2 digits (seconds) + "]"
    Seconds must be in 00–59. "[01:75]" is not a marker and stays plain text.

Anything that does not match the grammar is plain text. The scanner never
raises on malformed brackets.

This module does NOT:
    - Control audio playback (the presentation layer seeks the player)
    - Validate that an offset lies within the recording's duration
"""

from dataclasses import dataclass
from typing import Any, Union

_OPEN = "["
_CLOSE = "]"
_SEPARATOR = ":"
_MAX_MINUTE_DIGITS = 2
_SECOND_DIGITS = 2
_SECONDS_PER_MINUTE = 60


# ---------------------------------------------------------------------------
# Segment types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlainText:
    """A run of ordinary text between markers."""

    value: str

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class TimeMarker:
    """A recognised [MM:SS] marker and its resolved offset."""

    literal: str          # exactly as written, brackets included
    offset_seconds: int

    @property
    def text(self) -> str:
        return self.literal

    @property
    def label(self) -> str:
        """The marker without brackets, e.g. '02:30'."""
        return self.literal[1:-1]


Segment = Union[PlainText, TimeMarker]


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _match_marker(text: str, start: int) -> tuple[int, int] | None:
    """
    Try to read a marker beginning at text[start] == "[".

    Returns:
        (end_index, offset_seconds) where end_index is one past "]",
        or None if no valid marker starts here.
    """
    pos = start + 1
    length = len(text)

    minutes_start = pos
    while pos < length and _is_digit(text[pos]) and pos - minutes_start < _MAX_MINUTE_DIGITS:
        pos += 1
    if pos == minutes_start:
        return None
    minutes = int(text[minutes_start:pos])

    if pos >= length or text[pos] != _SEPARATOR:
        return None
    pos += 1

    seconds_start = pos
    while pos < length and _is_digit(text[pos]) and pos - seconds_start < _SECOND_DIGITS:
        pos += 1
    if pos - seconds_start != _SECOND_DIGITS:
        return None
    seconds = int(text[seconds_start:pos])

    if pos >= length or text[pos] != _CLOSE:
        return None

    if seconds >= _SECONDS_PER_MINUTE:
        return None

    return pos + 1, minutes * _SECONDS_PER_MINUTE + seconds


def extract_segments(text: str) -> list[Segment]:
    """
    Split narrative text into plain-text runs and time markers.

    Empty plain runs are not emitted, so "" yields [] and "[02:30]" yields
    a single TimeMarker.

    Args:
        text: Narrative text, possibly containing [MM:SS] markers.

    Returns:
        Ordered segment list. Rendering it with render_segments() returns
        the original text unchanged.
    """
    if not text:
        return []

    segments: list[Segment] = []
    plain_start = 0
    pos = 0
    length = len(text)

    while pos < length:
        if text[pos] != _OPEN:
            pos += 1
            continue

        match = _match_marker(text, pos)
        if match is None:
            pos += 1
            continue

        end, offset = match
        if pos > plain_start:
            segments.append(PlainText(text[plain_start:pos]))
        segments.append(TimeMarker(text[pos:end], offset))
        pos = end
        plain_start = end

    if plain_start < length:
        segments.append(PlainText(text[plain_start:]))

    return segments


def render_segments(segments: list[Segment]) -> str:
    """Concatenate segments back into the text they were extracted from."""
    return "".join(segment.text for segment in segments)


def extract_offsets(text: str) -> list[int]:
    """Return only the seek targets (seconds) found in the text, in order."""
    return [
        segment.offset_seconds
        for segment in extract_segments(text)
        if isinstance(segment, TimeMarker)
    ]


def format_timestamp(seconds: int) -> str:
    """
    Render an offset as a marker, e.g. 150 → '[02:30]'.

    Offsets of 100 minutes or more do not fit the two-digit grammar and
    are rendered with more minute digits; such text is not re-parsed as a
    marker.

    Raises:
        ValueError: If seconds is negative.
    """
    if seconds < 0:
        raise ValueError(f"Offset must be non-negative, got {seconds}")
    minutes, secs = divmod(int(seconds), _SECONDS_PER_MINUTE)
    return f"[{minutes:02d}:{secs:02d}]"


def segments_to_json(segments: list[Segment]) -> list[dict[str, Any]]:
    """Serialise segments into plain dicts for the HTTP layer."""
    out: list[dict[str, Any]] = []
    for segment in segments:
        if isinstance(segment, TimeMarker):
            out.append({
                "type": "timestamp",
                "literal": segment.literal,
                "label": segment.label,
                "offset_seconds": segment.offset_seconds,
            })
        else:
            out.append({"type": "text", "value": segment.value})
    return out
