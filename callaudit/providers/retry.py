"""
callaudit/providers/retry.py
=============================
Shared provider retry utility — CallAudit

Wraps a provider call so that transient failures (429 rate-limit, 5xx server
errors, timeouts, dropped connections) are retried with exponential
back-off. Works for both the OpenAI SDK and plain ``requests`` calls.

Usage::

    from callaudit.providers.retry import call_with_retry, chat_completions_with_retry

    body = call_with_retry(_post_generate_content, payload, api_key)

    response = chat_completions_with_retry(client, model=..., messages=[...])

This module does NOT:
    - Create or manage client instances
    - Interpret provider responses
"""

import logging
import time
from typing import Any, Callable

logger = logging.getLogger("callaudit.providers.retry")

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

MAX_RETRIES: int = 3          # total attempts = MAX_RETRIES + 1 (initial)
BASE_DELAY: float = 1.0       # seconds, first back-off delay
MAX_DELAY: float = 30.0
BACKOFF_FACTOR: float = 2.0

# HTTP status codes worth retrying on
_RETRYABLE_STATUS_CODES: set[int] = {429, 500, 502, 503, 504}

# Exception class names raised by openai / requests for transient faults
_RETRYABLE_EXCEPTION_NAMES: set[str] = {
    "RateLimitError",
    "APITimeoutError",
    "APIConnectionError",
    "Timeout",
    "ConnectTimeout",
    "ReadTimeout",
    "ConnectionError",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_retryable(exc: Exception) -> bool:
    """Return True if the exception is a transient provider error."""
    if type(exc).__name__ in _RETRYABLE_EXCEPTION_NAMES:
        return True

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code in _RETRYABLE_STATUS_CODES

    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def call_with_retry(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Call ``func(*args, **kwargs)`` with automatic retry.

    Non-retryable errors are re-raised immediately.

    Raises:
        The last exception if all retries are exhausted.
    """
    last_exc: Exception | None = None
    delay = BASE_DELAY
    name = getattr(func, "__name__", "provider call")

    for attempt in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            last_exc = exc

            if not _is_retryable(exc):
                logger.warning("%s failed with non-retryable error: %s", name, exc)
                raise

            if attempt < MAX_RETRIES:
                logger.warning(
                    "%s failed (attempt %d/%d): %s — retrying in %.1fs",
                    name,
                    attempt + 1,
                    MAX_RETRIES + 1,
                    exc,
                    delay,
                )
                time.sleep(delay)
                delay = min(delay * BACKOFF_FACTOR, MAX_DELAY)
            else:
                logger.error("%s failed after %d attempts: %s", name, MAX_RETRIES + 1, exc)

    raise last_exc  # type: ignore[misc]


def chat_completions_with_retry(client: Any, **kwargs: Any) -> Any:
    """Call ``client.chat.completions.create(**kwargs)`` with automatic retry."""
    return call_with_retry(client.chat.completions.create, **kwargs)
