# callaudit/schemas/__init__.py
# ==============================
# Provider Output Schema — CallAudit
#
# Decodes whatever the analysis provider returns into a typed AuditResult
# before anything downstream touches it. Malformed output raises
# AuditDecodeError instead of flowing into the aggregator.

from callaudit.schemas.audit_result import (  # noqa: F401
    DEFAULT_SUMMARY,
    AuditDecodeError,
    AuditResult,
    decode_audit_result,
)
