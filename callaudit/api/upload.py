"""
callaudit/api/upload.py
========================
HTTP API — CallAudit

Responsibility:
    - POST /api/v1/audit-call   — upload a recording, return the report
    - POST /api/v1/recompute    — apply human score/NA overrides, return the report
    - POST /api/v1/export-csv   — download the session as CSV
    - POST /api/v1/segments     — split narrative text into seekable segments
    - GET  /api/v1/criteria     — the fixed rubric

Status codes:
    422 — rejected upload, blank analyst name, bad review date, invalid override score
    502 — provider failure or malformed provider output
    500 — anything else
"""

import asyncio
import logging
import os
from typing import Optional

import aiohttp
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from callaudit.audio import AudioValidationError
from callaudit.export import content_disposition, export_csv
from callaudit.pipeline import run_audit
from callaudit.providers.errors import ProviderError
from callaudit.report import build_report
from callaudit.rubric import CRITERIA, ValidationError
from callaudit.schemas import AuditDecodeError
from callaudit.session import AuditSession
from callaudit.timestamps import extract_segments, segments_to_json

logger = logging.getLogger("callaudit.api")

WEBHOOK_URL: str | None = os.getenv("WEBHOOK_URL")


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class SessionBody(BaseModel):
    agent_name: str = ""
    review_date: Optional[str] = None
    scores: dict[str, int] = Field(default_factory=dict)
    na_flags: dict[str, bool] = Field(default_factory=dict)
    comments: dict[str, str] = Field(default_factory=dict)
    executive_summary: str = ""
    detailed_strengths: list[str] = Field(default_factory=list)
    detailed_improvements: list[str] = Field(default_factory=list)
    agreed_action: str = ""


class TextBody(BaseModel):
    text: str


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="CallAudit",
    description="Call-quality audit — weighted rubric scoring of call recordings.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session_from_body(body: SessionBody) -> AuditSession:
    try:
        return AuditSession.from_dict(body.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


async def _post_webhook(report: dict) -> None:
    """POST the report to WEBHOOK_URL. Failures are logged, never raised."""
    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                WEBHOOK_URL,
                json=report,
                headers={"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=30),
            ) as resp:
                logger.info("Webhook POST to %s — status %d", WEBHOOK_URL, resp.status)
    except Exception as exc:
        logger.error("Webhook POST failed: %s", exc)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/api/v1/criteria")
async def list_criteria():
    """Return the fixed rubric in scoring order."""
    return [
        {
            "id": c.id,
            "title": c.title,
            "short": c.short,
            "weight": c.weight,
            "allow_na": c.allow_na,
        }
        for c in CRITERIA
    ]


@app.post("/api/v1/audit-call")
async def audit_call(
    audio_file: UploadFile = File(...),
    agent_name: str = Form(...),
    review_date: Optional[str] = Form(None),
):
    """
    Accept a recording and run the full audit.

    Args:
        audio_file:  Uploaded recording.
        agent_name:  Analyst name recorded on the report.
        review_date: Optional ISO date (defaults to today).

    Returns:
        Report JSON including the editable "session" snapshot.
    """
    if audio_file is None or audio_file.filename is None:
        raise HTTPException(status_code=400, detail="Audio file is required.")

    logger.info("Audio file received: %s", audio_file.filename)

    try:
        audio_bytes = await audio_file.read()
    except Exception:
        raise HTTPException(status_code=400, detail="Failed to read uploaded file.")

    try:
        report = await asyncio.to_thread(
            run_audit, audio_bytes, audio_file.filename, agent_name, review_date
        )
    except AudioValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ProviderError as exc:
        logger.error("Provider failure: %s", exc)
        raise HTTPException(status_code=502, detail=f"Analysis Failed: {exc.message}")
    except AuditDecodeError as exc:
        logger.error("Provider returned malformed audit: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except Exception as exc:
        logger.error("Audit unexpected error: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Audit failed: {exc}")

    if WEBHOOK_URL:
        await _post_webhook(report)
    else:
        logger.debug("WEBHOOK_URL not configured — skipping POST.")

    return JSONResponse(status_code=200, content=report)


@app.post("/api/v1/recompute")
async def recompute(body: SessionBody):
    """Rebuild the report after human score or NA adjustments."""
    try:
        session = _session_from_body(body)
        report = build_report(session)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    report["session"] = session.to_dict()
    return JSONResponse(status_code=200, content=report)


@app.post("/api/v1/export-csv")
async def export(body: SessionBody):
    """Download the session as CSV."""
    session = _session_from_body(body)
    try:
        content = export_csv(session)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": content_disposition(session)},
    )


@app.post("/api/v1/segments")
async def segments(body: TextBody):
    """Split narrative text into plain-text runs and seekable markers."""
    return {"segments": segments_to_json(extract_segments(body.text))}
