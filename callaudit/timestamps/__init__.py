# callaudit/timestamps/__init__.py
# =================================
# Timestamp Extractor — CallAudit
#
# Turns narrative text with embedded [MM:SS] markers into plain-text runs
# and seekable markers for the presentation layer.
#
# Public API:
#   extract_segments(text) → list[PlainText | TimeMarker]
#   extract_offsets(text)  → list[int]

from callaudit.timestamps.extractor import (  # noqa: F401
    PlainText,
    Segment,
    TimeMarker,
    extract_offsets,
    extract_segments,
    format_timestamp,
    render_segments,
    segments_to_json,
)
