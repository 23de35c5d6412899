"""
callaudit/report.py
====================
Report Assembly — CallAudit

Responsibility:
    - Assemble the JSON report the presentation layer renders
    - Attach the compliance percentage (Rubric Aggregator)
    - Attach timestamp segments for every narrative field (Timestamp Extractor)

This function ONLY assembles. All values come from the session snapshot.
"""

import logging
from typing import Any

from callaudit.rubric import CRITERIA, chart_values, format_percentage, is_excluded
from callaudit.session import AuditSession
from callaudit.timestamps import extract_segments, segments_to_json

logger = logging.getLogger("callaudit.report")


def _narrative(text: str) -> dict[str, Any]:
    return {"text": text, "segments": segments_to_json(extract_segments(text))}


def build_report(session: AuditSession) -> dict[str, Any]:
    """
    Build the report for a session.

    Returns:
        {
          "agent_name", "review_date",
          "overall_percentage": float, "overall_display": "72.2%",
          "criteria": [{id, title, short, weight, score, not_applicable,
                        excluded, comment, comment_segments}, ...],
          "executive_summary": {text, segments},
          "detailed_strengths": [{text, segments}, ...],
          "detailed_improvements": [{text, segments}, ...],
          "chart_values": [int, ...],
          "agreed_action": str,
        }

    Raises:
        ValidationError: If a non-excluded criterion has an invalid score.
    """
    percentage = session.compliance()

    rows: list[dict[str, Any]] = []
    for criterion in CRITERIA:
        comment = session.comments.get(criterion.id, "")
        rows.append({
            "id": criterion.id,
            "title": criterion.title,
            "short": criterion.short,
            "weight": criterion.weight,
            "allow_na": criterion.allow_na,
            "score": session.scores.get(criterion.id, 0),
            "not_applicable": bool(session.na_flags.get(criterion.id, False)),
            "excluded": is_excluded(criterion, session.na_flags),
            "comment": comment,
            "comment_segments": segments_to_json(extract_segments(comment)),
        })

    report = {
        "agent_name": session.agent_name,
        "review_date": session.review_date,
        "overall_percentage": percentage,
        "overall_display": format_percentage(percentage),
        "criteria": rows,
        "executive_summary": _narrative(session.executive_summary),
        "detailed_strengths": [_narrative(t) for t in session.detailed_strengths],
        "detailed_improvements": [_narrative(t) for t in session.detailed_improvements],
        "chart_values": chart_values(CRITERIA, session.scores, session.na_flags),
        "agreed_action": session.agreed_action,
    }

    logger.info("Report assembled: %s overall.", report["overall_display"])
    return report
