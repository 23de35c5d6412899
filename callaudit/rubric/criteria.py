"""
callaudit/rubric/criteria.py
=============================
Fixed Audit Rubric — CallAudit

Responsibility:
    - Define the eight weighted criteria every call is scored against
    - Validate the rubric once at import time (unique ids, weights sum to 100)

The rubric is process-wide configuration. It is never mutated.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger("callaudit.rubric.criteria")

MAX_SCORE: int = 5
TOTAL_WEIGHT: int = 100


@dataclass(frozen=True)
class Criterion:
    """A single weighted rubric dimension."""

    id: str
    title: str
    weight: int          # percent; all weights sum to 100
    allow_na: bool = False
    short: str = ""      # abbreviated label for chart axes


CRITERIA: tuple[Criterion, ...] = (
    Criterion("greeting", "Greeting & Introduction", 5, short="Greeting"),
    Criterion("comm_style", "Communication Style", 10, short="Comm Style"),
    Criterion("issue_handling", "Issue Handling & Clarity", 20, short="Issue Handling"),
    Criterion("hold_proc", "Hold Procedure", 10, allow_na=True, short="Hold Proc"),
    Criterion("prof_empathy", "Professionalism & Empathy", 15, short="Empathy"),
    Criterion("resolution", "Resolution & Next Steps", 15, short="Resolution"),
    Criterion("closure", "Call Closure", 5, short="Closure"),
    Criterion("compliance", "Compliance & System Use", 20, short="Compliance"),
)

# Criterion whose NA flag is driven by the provider's "hold_na" field
HOLD_CRITERION_ID: str = "hold_proc"


def validate_weights(criteria: tuple[Criterion, ...] | list[Criterion]) -> None:
    """
    Check that criterion ids are unique and weights sum to 100.

    Raises:
        ValueError: If either check fails.
    """
    ids = [c.id for c in criteria]
    duplicates = {i for i in ids if ids.count(i) > 1}
    if duplicates:
        raise ValueError(f"Duplicate criterion ids: {sorted(duplicates)}")

    total = sum(c.weight for c in criteria)
    if total != TOTAL_WEIGHT:
        raise ValueError(f"Criterion weights must sum to {TOTAL_WEIGHT}, got {total}")


def criterion_ids(criteria: tuple[Criterion, ...] | list[Criterion] = CRITERIA) -> list[str]:
    """Return criterion ids in rubric order."""
    return [c.id for c in criteria]


def get_criterion(criterion_id: str) -> Criterion:
    """
    Look up a criterion by id.

    Raises:
        KeyError: If the id is not part of the rubric.
    """
    for c in CRITERIA:
        if c.id == criterion_id:
            return c
    raise KeyError(f"Unknown criterion id: {criterion_id!r}")


validate_weights(CRITERIA)
