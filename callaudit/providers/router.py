"""
callaudit/providers/router.py
==============================
Provider Router — CallAudit

Responsibility:
    1. Select the analysis provider
           AUDIT_PROVIDER set        → that provider ("gemini" | "openai" | "mock")
           GEMINI_API_KEY set        → Gemini
           OPENAI_API_KEY set        → OpenAI
           otherwise                 → offline mock
    2. Send the recording and obtain the raw audit JSON
    3. Decode it into a typed AuditResult

This is the single entry point for provider analysis.
"""

import logging
import os

from callaudit.providers import gemini_client, mock_client, openai_client
from callaudit.providers.errors import ProviderError
from callaudit.schemas import AuditResult, decode_audit_result

logger = logging.getLogger("callaudit.providers.router")

# Provider name → client module exposing analyze(audio_bytes, mime_type) → str
_PROVIDERS = {
    gemini_client.PROVIDER_NAME: gemini_client,
    openai_client.PROVIDER_NAME: openai_client,
    mock_client.PROVIDER_NAME: mock_client,
}


def select_provider() -> str:
    """
    Resolve the provider name from the environment.

    Raises:
        ProviderError: If AUDIT_PROVIDER names an unknown provider.
    """
    explicit = os.getenv("AUDIT_PROVIDER", "").strip().lower()
    if explicit:
        if explicit not in _PROVIDERS:
            raise ProviderError(
                explicit, f"Unknown provider. Allowed: {', '.join(sorted(_PROVIDERS))}"
            )
        return explicit

    if os.environ.get("GEMINI_API_KEY"):
        return gemini_client.PROVIDER_NAME
    if os.environ.get("OPENAI_API_KEY"):
        return openai_client.PROVIDER_NAME
    return mock_client.PROVIDER_NAME


def analyze_recording(audio_bytes: bytes, mime_type: str) -> AuditResult:
    """
    Score a recording with the configured provider.

    Args:
        audio_bytes: Validated upload bytes.
        mime_type:   MIME type resolved by the upload validator.

    Returns:
        Decoded AuditResult.

    Raises:
        ProviderError:    Provider call failed.
        AuditDecodeError: Provider output did not match the audit schema.
    """
    provider = select_provider()
    logger.info("Analysis provider selected: %s", provider)

    raw = _PROVIDERS[provider].analyze(audio_bytes, mime_type)
    logger.info("Provider response received (%d chars).", len(raw))

    return decode_audit_result(raw)
