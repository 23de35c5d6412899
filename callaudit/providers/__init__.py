# callaudit/providers/__init__.py
# ================================
# Analysis Providers — CallAudit
#
# External generative-AI services that score a recording against the
# rubric. Each client returns raw JSON text; the router decodes it.
#
#   gemini_client — Google Gemini REST API (requests)
#   openai_client — OpenAI audio chat model (openai SDK)
#   mock_client   — deterministic offline audit
#
# Public API:
#   analyze_recording(audio_bytes, mime_type) → AuditResult
