"""Exceptions raised by analysis provider clients."""


class ProviderError(Exception):
    """Raised when an analysis provider call fails."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider} analysis failed: {message}")
