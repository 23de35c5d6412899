"""
callaudit/audio/validator.py
=============================
Upload Validator — CallAudit

Responsibility:
    - Validate the uploaded recording's file extension
    - Validate the upload is non-empty and within the size limit
    - Resolve the MIME type sent to the analysis provider

No decoding or transcoding happens here. The raw bytes are passed to the
provider unchanged.
"""

import os

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIME_TYPES: dict[str, str] = {
    ".wav": "audio/wav",
    ".mp3": "audio/mp3",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".webm": "audio/webm",
}
ALLOWED_EXTENSIONS = set(MIME_TYPES)
DEFAULT_MAX_UPLOAD_MB: float = 25.0


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AudioValidationError(Exception):
    """Raised when the uploaded audio file fails validation."""
    pass


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _extract_extension(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return ext.lower()


def _max_upload_bytes() -> int:
    raw = os.getenv("MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB))
    try:
        megabytes = float(raw)
    except ValueError:
        megabytes = DEFAULT_MAX_UPLOAD_MB
    return int(megabytes * 1024 * 1024)


def validate_extension(filename: str) -> str:
    """
    Check that the file extension is an accepted audio type.

    Returns:
        The lower-cased extension, e.g. ".mp3".

    Raises:
        AudioValidationError: If the filename is missing or the extension
            is not allowed.
    """
    if not filename:
        raise AudioValidationError("Filename is missing.")

    ext = _extract_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise AudioValidationError(
            f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    return ext


def validate_size(audio_bytes: bytes) -> None:
    """
    Check that the upload is non-empty and under MAX_UPLOAD_MB.

    Raises:
        AudioValidationError: If the file is empty or too large.
    """
    if not audio_bytes:
        raise AudioValidationError("Audio file is empty.")

    limit = _max_upload_bytes()
    if len(audio_bytes) > limit:
        raise AudioValidationError(
            f"Audio file ({len(audio_bytes) / (1024 * 1024):.1f} MB) exceeds the "
            f"maximum allowed ({limit / (1024 * 1024):.1f} MB)."
        )


def validate_upload(filename: str, audio_bytes: bytes) -> str:
    """
    Full upload validation.

    Returns:
        MIME type to declare to the provider.

    Raises:
        AudioValidationError: If any check fails.
    """
    ext = validate_extension(filename)
    validate_size(audio_bytes)
    return MIME_TYPES[ext]
