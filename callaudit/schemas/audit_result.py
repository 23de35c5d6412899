"""
callaudit/schemas/audit_result.py
==================================
Audit Result Decoder — CallAudit

Responsibility:
    - Define the typed AuditResult returned by every analysis provider
    - Decode raw provider output (JSON text or dict) into an AuditResult
    - FAIL FAST with AuditDecodeError if the shape is wrong

Expected provider JSON:
    {
      "scores": {"greeting": 0-5, ..., "compliance": 0-5},
      "comments": {"greeting": "string", ...},
      "hold_na": bool,
      "executive_summary": "string",
      "detailed_strengths": ["string"],
      "detailed_improvements": ["string"]
    }

Defaults for optional keys:
    comments              → "" per missing criterion
    hold_na               → False
    executive_summary     → "No summary generated."
    detailed_strengths    → []
    detailed_improvements → []

This module does NOT:
    - Call any provider
    - Compute the compliance percentage
    - Interpret timestamp markers inside narrative fields
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from callaudit.rubric.criteria import CRITERIA, MAX_SCORE

logger = logging.getLogger("callaudit.schemas.audit_result")

DEFAULT_SUMMARY: str = "No summary generated."


class AuditDecodeError(Exception):
    """Raised when provider output does not match the AuditResult shape."""

    def __init__(self, field_name: str, message: str):
        self.field = field_name
        self.message = message
        super().__init__(f"Invalid audit result field '{field_name}': {message}")


@dataclass(frozen=True)
class AuditResult:
    """Structured scoring result for one recording."""

    scores: dict[str, int]
    comments: dict[str, str]
    hold_na: bool = False
    executive_summary: str = DEFAULT_SUMMARY
    detailed_strengths: tuple[str, ...] = field(default_factory=tuple)
    detailed_improvements: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scores": dict(self.scores),
            "comments": dict(self.comments),
            "hold_na": self.hold_na,
            "executive_summary": self.executive_summary,
            "detailed_strengths": list(self.detailed_strengths),
            "detailed_improvements": list(self.detailed_improvements),
        }


# ---------------------------------------------------------------------------
# Field decoders
# ---------------------------------------------------------------------------


def _strip_code_fences(raw: str) -> str:
    """Remove a ```json ... ``` wrapper that chat models sometimes add."""
    text = raw.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _load_payload(payload: Any) -> dict[str, Any]:
    if isinstance(payload, (str, bytes)):
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        try:
            payload = json.loads(_strip_code_fences(payload))
        except json.JSONDecodeError as exc:
            raise AuditDecodeError("$", f"not valid JSON ({exc.msg})") from exc

    if not isinstance(payload, dict):
        raise AuditDecodeError(
            "$", f"expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def _decode_score(criterion_id: str, value: Any) -> int:
    if isinstance(value, bool):
        raise AuditDecodeError(f"scores.{criterion_id}", f"expected integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise AuditDecodeError(
                f"scores.{criterion_id}", f"expected integer, got {value!r}"
            )
        value = int(value)
    if not isinstance(value, int):
        raise AuditDecodeError(
            f"scores.{criterion_id}", f"expected integer, got {type(value).__name__}"
        )
    if value < 0 or value > MAX_SCORE:
        raise AuditDecodeError(
            f"scores.{criterion_id}", f"out of range [0, {MAX_SCORE}]: {value}"
        )
    return value


def _decode_scores(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        raise AuditDecodeError("scores", "missing or not an object")

    scores: dict[str, int] = {}
    for criterion in CRITERIA:
        if criterion.id not in raw:
            raise AuditDecodeError("scores", f"missing criterion '{criterion.id}'")
        scores[criterion.id] = _decode_score(criterion.id, raw[criterion.id])

    extra = set(raw) - set(scores)
    if extra:
        logger.warning("Ignoring unknown score ids from provider: %s", sorted(extra))
    return scores


def _decode_comments(raw: Any) -> dict[str, str]:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise AuditDecodeError("comments", "not an object")

    comments: dict[str, str] = {}
    for criterion in CRITERIA:
        value = raw.get(criterion.id, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise AuditDecodeError(
                f"comments.{criterion.id}", f"expected string, got {type(value).__name__}"
            )
        comments[criterion.id] = value
    return comments


def _decode_string_list(name: str, raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise AuditDecodeError(name, f"expected list, got {type(raw).__name__}")
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise AuditDecodeError(
                f"{name}[{i}]", f"expected string, got {type(item).__name__}"
            )
    return tuple(raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decode_audit_result(payload: Any) -> AuditResult:
    """
    Decode raw provider output into an AuditResult.

    Args:
        payload: JSON text (optionally fenced in ```json) or an already
            parsed dict.

    Returns:
        A fully populated AuditResult.

    Raises:
        AuditDecodeError: If any required field is missing or malformed.
    """
    data = _load_payload(payload)

    scores = _decode_scores(data.get("scores"))
    comments = _decode_comments(data.get("comments"))

    hold_na = data.get("hold_na", False)
    if hold_na is None:
        hold_na = False
    if not isinstance(hold_na, bool):
        raise AuditDecodeError("hold_na", f"expected bool, got {type(hold_na).__name__}")

    summary = data.get("executive_summary")
    if summary is None or summary == "":
        summary = DEFAULT_SUMMARY
    if not isinstance(summary, str):
        raise AuditDecodeError(
            "executive_summary", f"expected string, got {type(summary).__name__}"
        )

    result = AuditResult(
        scores=scores,
        comments=comments,
        hold_na=hold_na,
        executive_summary=summary,
        detailed_strengths=_decode_string_list(
            "detailed_strengths", data.get("detailed_strengths")
        ),
        detailed_improvements=_decode_string_list(
            "detailed_improvements", data.get("detailed_improvements")
        ),
    )

    logger.info(
        "Audit result decoded: hold_na=%s, %d strengths, %d improvements.",
        result.hold_na,
        len(result.detailed_strengths),
        len(result.detailed_improvements),
    )
    return result
