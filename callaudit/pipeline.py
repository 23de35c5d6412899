"""
callaudit/pipeline.py
======================
Audit Pipeline Orchestrator — CallAudit

Responsibility:
    1. Validate the upload, the analyst name, and the review date
    2. Send the recording to the analysis provider
    3. Decode the provider result (FAIL FAST on malformed output)
    4. Start a fresh session and apply the result
    5. Return the assembled report

Step order:
    Step 1: Upload validation   → mime_type
    Step 2: Provider analysis   → AuditResult
    Step 3: Session             → AuditSession
    Step 4: Report              → report JSON

This layer MUST NOT:
    - Score criteria itself
    - Modify provider results semantically
"""

import logging
from typing import Any

from callaudit.audio import AudioValidationError, validate_upload
from callaudit.providers.router import analyze_recording
from callaudit.report import build_report
from callaudit.session import AuditSession

logger = logging.getLogger("callaudit.pipeline")


def run_audit(
    audio_bytes: bytes,
    filename: str,
    agent_name: str,
    review_date: str | None = None,
) -> dict[str, Any]:
    """
    Execute the full audit for one recording.

    Args:
        audio_bytes: Raw uploaded audio.
        filename:    Original filename (used for type validation).
        agent_name:  Analyst name recorded on the report.
        review_date: ISO date for the report; defaults to today.

    Returns:
        Report dict (see callaudit.report.build_report) with an extra
        "session" key holding the editable session snapshot.

    Raises:
        AudioValidationError: Upload, analyst name, or review date rejected.
        ProviderError:        Provider call failed.
        AuditDecodeError:     Provider returned malformed output.
    """
    if not agent_name or not agent_name.strip():
        raise AudioValidationError("Please enter the Analyst's Name.")

    try:
        session = AuditSession.new(agent_name, review_date)
    except ValueError as exc:
        raise AudioValidationError(str(exc)) from exc

    # ==================================================================
    # STEP 1 — Upload validation
    # ==================================================================
    mime_type = validate_upload(filename, audio_bytes)
    logger.info("Upload accepted: %s (%s, %.2f KB)", filename, mime_type, len(audio_bytes) / 1024)

    # ==================================================================
    # STEP 2 — Provider analysis
    # ==================================================================
    result = analyze_recording(audio_bytes, mime_type)

    # ==================================================================
    # STEP 3 — Session
    # ==================================================================
    session = session.apply_result(result)

    # ==================================================================
    # STEP 4 — Report
    # ==================================================================
    report = build_report(session)
    report["session"] = session.to_dict()

    logger.info("Audit complete for %s: %s", session.agent_name, report["overall_display"])
    return report
