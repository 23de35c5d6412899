# callaudit/rubric/__init__.py
# =============================
# Rubric Aggregator — CallAudit
#
# Responsibility:
#   - Own the fixed eight-criterion rubric (id, title, weight, allow_na)
#   - Compute the weighted compliance percentage from scores + NA flags
#
# Public API:
#   - CRITERIA              — the immutable rubric
#   - compute_compliance()  — deterministic weighted percentage

from callaudit.rubric.criteria import (  # noqa: F401
    CRITERIA,
    HOLD_CRITERION_ID,
    MAX_SCORE,
    Criterion,
    criterion_ids,
    get_criterion,
    validate_weights,
)
from callaudit.rubric.aggregator import (  # noqa: F401
    ValidationError,
    chart_values,
    compute_compliance,
    format_percentage,
    is_excluded,
)
