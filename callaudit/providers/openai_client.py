"""
callaudit/providers/openai_client.py
=====================================
OpenAI Audio Client — CallAudit

Responsibility:
    - Send the audit prompt and the recording (as an input_audio content
      part) to an audio-capable OpenAI chat model
    - Return the raw JSON text from the first choice

Only WAV and MP3 uploads can be sent as input_audio; other formats raise
ProviderError so the caller can pick a different provider.

This module does NOT:
    - Decode or validate the audit JSON (see callaudit.schemas)
    - Transcode audio
"""

import base64
import logging
import os

from openai import OpenAI

from callaudit.providers.errors import ProviderError
from callaudit.providers.prompt import SYSTEM_PROMPT, USER_INSTRUCTION
from callaudit.providers.retry import chat_completions_with_retry

logger = logging.getLogger("callaudit.providers.openai_client")

PROVIDER_NAME = "openai"
DEFAULT_MODEL = "gpt-4o-audio-preview"

# MIME type → input_audio "format"
_AUDIO_FORMATS: dict[str, str] = {
    "audio/wav": "wav",
    "audio/mp3": "mp3",
    "audio/mpeg": "mp3",
}


def _build_messages(audio_bytes: bytes, audio_format: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": USER_INSTRUCTION},
                {
                    "type": "input_audio",
                    "input_audio": {
                        "data": base64.b64encode(audio_bytes).decode("ascii"),
                        "format": audio_format,
                    },
                },
            ],
        },
    ]


def analyze(audio_bytes: bytes, mime_type: str) -> str:
    """
    Score a recording with an OpenAI audio model.

    Returns:
        Raw response text (expected to be the audit JSON).

    Raises:
        ProviderError: Missing key, unsupported format, API failure, or an
            empty response.
    """
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise ProviderError(PROVIDER_NAME, "OPENAI_API_KEY environment variable is not set.")

    audio_format = _AUDIO_FORMATS.get(mime_type)
    if audio_format is None:
        raise ProviderError(
            PROVIDER_NAME, f"Unsupported audio type for OpenAI input_audio: {mime_type}"
        )

    model = os.getenv("OPENAI_AUDIO_MODEL", DEFAULT_MODEL)
    client = OpenAI(api_key=api_key)

    logger.info("Sending %.2f KB of audio to OpenAI (model: %s)", len(audio_bytes) / 1024, model)

    try:
        response = chat_completions_with_retry(
            client,
            model=model,
            modalities=["text"],
            temperature=0.0,
            messages=_build_messages(audio_bytes, audio_format),
        )
    except Exception as exc:
        raise ProviderError(PROVIDER_NAME, str(exc)) from exc

    content = response.choices[0].message.content
    if not content:
        raise ProviderError(PROVIDER_NAME, "OpenAI returned empty response")

    return content.strip()
