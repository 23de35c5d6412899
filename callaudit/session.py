"""
callaudit/session.py
=====================
Audit Session — CallAudit

Responsibility:
    - Hold the per-audit record (analyst, date, scores, NA flags, comments,
      narrative fields, agreed action) as an immutable value
    - Start every session from all-zero scores and all-false NA flags
    - Replace scores/comments/narratives wholesale when a provider result
      arrives
    - Apply human per-criterion overrides without touching other criteria
    - Accept only ISO calendar dates (YYYY-MM-DD) as the review date

Every "with_*" method returns a new session. Nothing here is mutated in
place, so the aggregator and extractor only ever see plain snapshots.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from callaudit.rubric import (
    CRITERIA,
    HOLD_CRITERION_ID,
    MAX_SCORE,
    compute_compliance,
    get_criterion,
)
from callaudit.schemas import DEFAULT_SUMMARY, AuditResult

logger = logging.getLogger("callaudit.session")

PENDING_COMMENT: str = "Pending analysis..."


def parse_review_date(value: str | None) -> str:
    """
    Normalise a review date to YYYY-MM-DD. Blank means today.

    Raises:
        ValueError: If the value is not an ISO calendar date.
    """
    if value is None or not str(value).strip():
        return date.today().isoformat()
    try:
        return date.fromisoformat(str(value).strip()).isoformat()
    except ValueError:
        raise ValueError(f"Invalid review date {value!r}: expected YYYY-MM-DD.") from None


@dataclass(frozen=True)
class AuditSession:
    """Immutable snapshot of one audit."""

    agent_name: str
    review_date: str
    scores: dict[str, int] = field(default_factory=dict)
    na_flags: dict[str, bool] = field(default_factory=dict)
    comments: dict[str, str] = field(default_factory=dict)
    executive_summary: str = ""
    detailed_strengths: tuple[str, ...] = ()
    detailed_improvements: tuple[str, ...] = ()
    agreed_action: str = ""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, agent_name: str, review_date: str | None = None) -> "AuditSession":
        """
        Start a session with default scores, flags, and comments.

        Raises:
            ValueError: If review_date is given but is not an ISO date.
        """
        return cls(
            agent_name=agent_name.strip(),
            review_date=parse_review_date(review_date),
            scores={c.id: 0 for c in CRITERIA},
            na_flags={c.id: False for c in CRITERIA},
            comments={c.id: PENDING_COMMENT for c in CRITERIA},
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditSession":
        """
        Rebuild a session from its JSON form (e.g. an edited report sent back
        by the presentation layer). Missing criteria fall back to defaults.
        """
        base = cls.new(
            str(data.get("agent_name", "")),
            data.get("review_date") or None,
        )
        scores = dict(base.scores)
        scores.update(data.get("scores") or {})
        na_flags = dict(base.na_flags)
        na_flags.update({k: bool(v) for k, v in (data.get("na_flags") or {}).items()})
        comments = dict(base.comments)
        comments.update({k: str(v) for k, v in (data.get("comments") or {}).items()})

        return replace(
            base,
            scores=scores,
            na_flags=na_flags,
            comments=comments,
            executive_summary=str(data.get("executive_summary") or ""),
            detailed_strengths=tuple(data.get("detailed_strengths") or ()),
            detailed_improvements=tuple(data.get("detailed_improvements") or ()),
            agreed_action=str(data.get("agreed_action") or ""),
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply_result(self, result: AuditResult) -> "AuditSession":
        """Replace scores, comments, and narratives with a provider result."""
        na_flags = dict(self.na_flags)
        na_flags[HOLD_CRITERION_ID] = result.hold_na

        logger.info(
            "Applying audit result for %s (hold_na=%s).",
            self.agent_name or "<unnamed>", result.hold_na,
        )
        return replace(
            self,
            scores=dict(result.scores),
            comments=dict(result.comments),
            na_flags=na_flags,
            executive_summary=result.executive_summary or DEFAULT_SUMMARY,
            detailed_strengths=tuple(result.detailed_strengths),
            detailed_improvements=tuple(result.detailed_improvements),
        )

    def with_score(self, criterion_id: str, score: int) -> "AuditSession":
        """
        Override one criterion's score.

        Raises:
            KeyError:   Unknown criterion id.
            ValueError: Score is not an integer in [0, 5].
        """
        get_criterion(criterion_id)
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= MAX_SCORE:
            raise ValueError(f"Score must be an integer in [0, {MAX_SCORE}], got {score!r}")

        scores = dict(self.scores)
        scores[criterion_id] = score
        return replace(self, scores=scores)

    def with_na(self, criterion_id: str, flag: bool) -> "AuditSession":
        """
        Set one criterion's not-applicable flag.

        The flag is stored for any criterion, but the aggregator only honours
        it where the criterion allows NA.

        Raises:
            KeyError: Unknown criterion id.
        """
        criterion = get_criterion(criterion_id)
        if flag and not criterion.allow_na:
            logger.debug("NA flag set on %s, which does not allow NA; it will be ignored.", criterion_id)

        na_flags = dict(self.na_flags)
        na_flags[criterion_id] = bool(flag)
        return replace(self, na_flags=na_flags)

    def with_comment(self, criterion_id: str, comment: str) -> "AuditSession":
        get_criterion(criterion_id)
        comments = dict(self.comments)
        comments[criterion_id] = comment
        return replace(self, comments=comments)

    def with_agreed_action(self, text: str) -> "AuditSession":
        return replace(self, agreed_action=text)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def compliance(self) -> float:
        """Weighted compliance percentage for the current snapshot."""
        return compute_compliance(CRITERIA, self.scores, self.na_flags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_name": self.agent_name,
            "review_date": self.review_date,
            "scores": dict(self.scores),
            "na_flags": dict(self.na_flags),
            "comments": dict(self.comments),
            "executive_summary": self.executive_summary,
            "detailed_strengths": list(self.detailed_strengths),
            "detailed_improvements": list(self.detailed_improvements),
            "agreed_action": self.agreed_action,
        }
