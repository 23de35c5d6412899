"""
callaudit/rubric/aggregator.py
===============================
Rubric Aggregator — CallAudit

Responsibility:
    - Accept the fixed criteria, a score set, and not-applicable flags
    - Compute a single weighted compliance percentage (0.0–100.0)
    - Provide per-criterion plotted values for the presentation layer

Scoring rules:
    - A criterion is excluded only when its NA flag is set AND it allows NA.
      Excluded criteria contribute to neither numerator nor denominator.
    - percentage = weighted_sum / (total_weight * 5) * 100
    - If every criterion is excluded the percentage is 0.0
    - Rounded to one decimal place, half-up, on the exact rational value

Score policy:
    - A missing score counts as 0
    - A present score that is not an int in [0, 5] raises ValidationError
      (bools are rejected). Excluded criteria are not inspected.

This module does NOT:
    - Call any LLM or external API
    - Parse provider output (see callaudit.schemas)
    - Hold or mutate session state
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Any, Mapping, Sequence

from callaudit.rubric.criteria import MAX_SCORE, Criterion

logger = logging.getLogger("callaudit.rubric.aggregator")


class ValidationError(Exception):
    """Raised when a score for a non-excluded criterion is invalid."""

    def __init__(self, criterion_id: str, value: Any):
        self.criterion_id = criterion_id
        self.value = value
        super().__init__(
            f"Score for {criterion_id!r} must be an integer in [0, {MAX_SCORE}], got {value!r}"
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_excluded(criterion: Criterion, na_flags: Mapping[str, bool]) -> bool:
    """Return True if the criterion is dropped from scoring entirely."""
    return bool(na_flags.get(criterion.id, False)) and criterion.allow_na


def _score_for(criterion: Criterion, scores: Mapping[str, Any]) -> int:
    value = scores.get(criterion.id)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(criterion.id, value)
    if value < 0 or value > MAX_SCORE:
        raise ValidationError(criterion.id, value)
    return value


def round_percentage(value: Fraction) -> float:
    """Round an exact percentage to one decimal place, half-up."""
    exact = Decimal(value.numerator) / Decimal(value.denominator)
    return float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_percentage(value: float) -> str:
    """Render a percentage the way reports and exports show it, e.g. '72.2%'."""
    return f"{value:.1f}%"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_compliance(
    criteria: Sequence[Criterion],
    scores: Mapping[str, Any],
    na_flags: Mapping[str, bool],
) -> float:
    """
    Compute the weighted compliance percentage.

    Args:
        criteria:  Ordered rubric criteria.
        scores:    Criterion id → score (0–5). Extra ids are ignored.
        na_flags:  Criterion id → not-applicable flag.

    Returns:
        Percentage in [0.0, 100.0], rounded to one decimal place.

    Raises:
        ValidationError: If a non-excluded criterion has an invalid score.
    """
    total_weight = 0
    weighted_sum = 0

    for criterion in criteria:
        if is_excluded(criterion, na_flags):
            logger.debug("Criterion %s excluded (not applicable)", criterion.id)
            continue
        total_weight += criterion.weight
        weighted_sum += _score_for(criterion, scores) * criterion.weight

    if total_weight == 0:
        return 0.0

    percentage = round_percentage(
        Fraction(weighted_sum * 100, total_weight * MAX_SCORE)
    )
    logger.debug(
        "Compliance: weighted_sum=%d total_weight=%d percentage=%.1f",
        weighted_sum, total_weight, percentage,
    )
    return percentage


def chart_values(
    criteria: Sequence[Criterion],
    scores: Mapping[str, Any],
    na_flags: Mapping[str, bool],
) -> list[int]:
    """
    Per-criterion values for the radar chart, in rubric order.

    A criterion flagged not-applicable is plotted at 0. Missing or
    non-numeric scores are plotted at 0 as well; the chart never raises.
    """
    values: list[int] = []
    for criterion in criteria:
        if na_flags.get(criterion.id, False):
            values.append(0)
            continue
        value = scores.get(criterion.id)
        if isinstance(value, bool) or not isinstance(value, int):
            values.append(0)
        else:
            values.append(min(max(value, 0), MAX_SCORE))
    return values
