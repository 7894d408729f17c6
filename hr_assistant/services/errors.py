"""Exceptions raised by the LLM-backed services."""


class ProviderNotConfiguredError(ValueError):
    """An LLM provider was requested but its API key is not configured."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} API key not configured")


class LLMProviderError(RuntimeError):
    """The upstream LLM API call failed."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        detail = f"{provider} API error"
        if status_code is not None:
            detail += f": {status_code}"
        super().__init__(f"{detail} {message}".strip())


class TrainingDataError(ValueError):
    """Training request contained no usable examples."""
