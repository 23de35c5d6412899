"""
callaudit/export/csv_export.py
===============================
CSV Export — CallAudit

Flattens a session into the tabular form auditors download:

    Analyst,"<agent>",Date,<date>
    Criteria,Weight,Score,Comments
    <title>,<weight>%,<score | N/A>,"<comment>"
    ...
    OVERALL SCORE,,<pct>%,"<executive summary>"

Analyst, comment, and summary fields are always quoted with internal quotes doubled.
"""

import re
from urllib.parse import quote

from callaudit.rubric import CRITERIA, format_percentage
from callaudit.session import AuditSession

HEADERS: tuple[str, ...] = ("Criteria", "Weight", "Score", "Comments")
NOT_APPLICABLE: str = "N/A"
SUMMARY_LABEL: str = "OVERALL SCORE"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9\-.]+")


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(session: AuditSession) -> str:
    """
    Render the session as CSV text.

    Raises:
        ValidationError: If the overall percentage cannot be computed.
    """
    lines = [
        f"Analyst,{_quote(session.agent_name)},Date,{session.review_date}",
        ",".join(HEADERS),
    ]

    for criterion in CRITERIA:
        if session.na_flags.get(criterion.id, False):
            score = NOT_APPLICABLE
        else:
            score = str(session.scores.get(criterion.id, 0))
        comment = session.comments.get(criterion.id, "")
        lines.append(",".join([
            criterion.title,
            f"{criterion.weight}%",
            score,
            _quote(comment),
        ]))

    lines.append(",".join([
        SUMMARY_LABEL,
        "",
        format_percentage(session.compliance()),
        _quote(session.executive_summary),
    ]))
    return "\n".join(lines)


def export_filename(session: AuditSession) -> str:
    """
    Download name for the export, e.g. 'Audit_Jane_Doe_2026-10-17.csv'.

    Only ASCII letters, digits, '-' and '.' survive; every other run becomes
    '_' so the name is safe inside a quoted header parameter.
    """
    agent = _UNSAFE_FILENAME_CHARS.sub("_", session.agent_name.strip()).strip("_") or "unknown"
    review_date = _UNSAFE_FILENAME_CHARS.sub("_", session.review_date)
    return f"Audit_{agent}_{review_date}.csv"


def content_disposition(session: AuditSession) -> str:
    """
    Content-Disposition value for the export download.

    The plain filename is ASCII-only; the RFC 5987 filename* parameter keeps
    the analyst's name as typed for clients that support it.
    """
    readable = f"Audit_{session.agent_name.strip() or 'unknown'}_{session.review_date}.csv"
    return (
        f'attachment; filename="{export_filename(session)}"; '
        f"filename*=UTF-8''{quote(readable, safe='')}"
    )
