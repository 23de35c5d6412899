# callaudit/audio/__init__.py
# ============================
# Audio Upload Layer — CallAudit
#
# Validates uploads (extension, emptiness, size) and resolves the MIME type
# sent to the analysis provider. Recordings are never decoded locally.

from callaudit.audio.validator import (  # noqa: F401
    ALLOWED_EXTENSIONS,
    AudioValidationError,
    validate_upload,
)
