"""OpenAI API client initialization.

Document analysis and the default chat provider both go through the
async OpenAI SDK. One client (and its connection pool) is kept per API key.
"""

from functools import lru_cache

from openai import AsyncOpenAI

from hr_assistant.config import get_settings
from hr_assistant.services.errors import ProviderNotConfiguredError


@lru_cache
def _client_for_key(api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key)


def get_openai_client() -> AsyncOpenAI:
    """Return the shared async OpenAI client for the configured key.

    Raises:
        ProviderNotConfiguredError: If OPENAI_API_KEY is not set.
    """
    settings = get_settings()

    if not settings.openai_api_key:
        raise ProviderNotConfiguredError("OpenAI")

    return _client_for_key(settings.openai_api_key)
