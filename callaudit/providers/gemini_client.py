"""
callaudit/providers/gemini_client.py
=====================================
Google Gemini Client — CallAudit

Responsibility:
    - Send the audit prompt plus the base64-encoded recording to the Gemini
      generateContent REST endpoint
    - Request a JSON response (generationConfig.response_mime_type)
    - Return the raw JSON text from candidates[0].content.parts[0].text

This module does NOT:
    - Decode or validate the audit JSON (see callaudit.schemas)
    - Compute scores or percentages
    - Transcode audio
"""

import base64
import logging
import os
from typing import Any

import requests

from callaudit.providers.errors import ProviderError
from callaudit.providers.prompt import SYSTEM_PROMPT, USER_INSTRUCTION
from callaudit.providers.retry import call_with_retry

logger = logging.getLogger("callaudit.providers.gemini_client")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

PROVIDER_NAME = "gemini"
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
REQUEST_TIMEOUT = 300  # seconds


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _endpoint(model: str) -> str:
    return f"{GEMINI_API_BASE}/models/{model}:generateContent"


def _build_payload(audio_bytes: bytes, mime_type: str) -> dict[str, Any]:
    return {
        "contents": [{
            "parts": [
                {"text": f"{SYSTEM_PROMPT}\n\n{USER_INSTRUCTION}"},
                {
                    "inline_data": {
                        "mime_type": mime_type or "audio/mp3",
                        "data": base64.b64encode(audio_bytes).decode("ascii"),
                    }
                },
            ]
        }],
        "generationConfig": {
            "response_mime_type": "application/json",
        },
    }


def _error_message(resp: requests.Response) -> str:
    """Pull error.message out of a failed response, if there is one."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"API Error: {resp.status_code}"


def _post_generate_content(
    payload: dict[str, Any],
    api_key: str,
    model: str,
) -> dict[str, Any]:
    resp = requests.post(
        _endpoint(model),
        params={"key": api_key},
        headers={"Content-Type": "application/json"},
        json=payload,
        timeout=REQUEST_TIMEOUT,
    )
    if not resp.ok:
        raise ProviderError(PROVIDER_NAME, _error_message(resp), status_code=resp.status_code)
    return resp.json()


def _extract_text(body: Any) -> str:
    """Return candidates[0].content.parts[0].text, or raise ProviderError."""
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    if not isinstance(text, str) or not text.strip():
        raise ProviderError(PROVIDER_NAME, "Invalid response format from Gemini API")
    return text


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze(audio_bytes: bytes, mime_type: str) -> str:
    """
    Score a recording with Gemini.

    Args:
        audio_bytes: Raw uploaded audio.
        mime_type:   MIME type of the upload (e.g. "audio/mp3").

    Returns:
        Raw JSON text produced by the model.

    Raises:
        ProviderError: If the key is missing, the request fails, or the
            response has no candidate text.
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise ProviderError(PROVIDER_NAME, "GEMINI_API_KEY environment variable is not set.")

    model = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
    payload = _build_payload(audio_bytes, mime_type)

    logger.info("Sending %.2f KB of audio to Gemini (model: %s)", len(audio_bytes) / 1024, model)

    try:
        body = call_with_retry(_post_generate_content, payload, api_key, model)
    except requests.RequestException as exc:
        raise ProviderError(PROVIDER_NAME, f"request failed: {exc}") from exc

    return _extract_text(body)
