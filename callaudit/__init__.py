# callaudit/__init__.py
# ======================
# CallAudit — call-quality audit service
#
# Core (pure, synchronous):
#   - callaudit.rubric      — fixed rubric + weighted compliance percentage
#   - callaudit.timestamps  — [MM:SS] marker extraction for seekable narratives
#
# Around the core:
#   - callaudit.schemas     — strict decode of provider output
#   - callaudit.session     — immutable per-audit record
#   - callaudit.report      — report assembly
#   - callaudit.export      — CSV export
#   - callaudit.providers   — Gemini / OpenAI / mock analysis providers
#   - callaudit.api         — FastAPI endpoints

__version__ = "1.0.0"
