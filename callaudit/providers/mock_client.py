"""
callaudit/providers/mock_client.py
===================================
Offline mock provider — CallAudit

Produces a plausible audit without calling any API, so the service can be
exercised with no keys configured. Output is seeded from the audio bytes:
the same recording always yields the same audit.
"""

import json
import logging
import random
import zlib

from callaudit.rubric import CRITERIA
from callaudit.timestamps import format_timestamp

logger = logging.getLogger("callaudit.providers.mock_client")

PROVIDER_NAME = "mock"


def analyze(audio_bytes: bytes, mime_type: str) -> str:
    """Return mock audit JSON (scores 2–4, marker-bearing comments)."""
    rng = random.Random(zlib.crc32(audio_bytes))

    scores = {c.id: rng.randint(2, 4) for c in CRITERIA}
    comments = {
        c.id: (
            f"Mock analysis. {format_timestamp(30)} Good behavior noted. "
            f"{format_timestamp(75)} Slight error detected."
        )
        for c in CRITERIA
    }

    payload = {
        "scores": scores,
        "comments": comments,
        "hold_na": False,
        "executive_summary": (
            f"Mock summary: Call started well at {format_timestamp(5)}. "
            f"Issues at {format_timestamp(80)}. Closed well at {format_timestamp(150)}."
        ),
        "detailed_strengths": [f"Polite greeting {format_timestamp(5)}."],
        "detailed_improvements": [f"Missed security {format_timestamp(40)}."],
    }

    logger.info("Mock audit generated for %d bytes of %s audio.", len(audio_bytes), mime_type)
    return json.dumps(payload)
