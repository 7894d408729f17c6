"""Gemini API client initialization with error handling.

Uses the modern google-genai SDK (not google.generativeai).
"""

from google import genai

from hr_assistant.config import get_settings
from hr_assistant.services.errors import ProviderNotConfiguredError


def get_gemini_client() -> genai.Client:
    """Initialize and return a Gemini API client.

    Returns:
        genai.Client: Initialized Gemini client ready for API calls.

    Raises:
        ProviderNotConfiguredError: If GEMINI_API_KEY is not set.

    Example:
        >>> client = get_gemini_client()
        >>> response = client.models.generate_content(
        ...     model="gemini-1.5-flash",
        ...     contents="Hello world"
        ... )
    """
    settings = get_settings()

    if not settings.gemini_api_key:
        raise ProviderNotConfiguredError("Gemini")

    return genai.Client(api_key=settings.gemini_api_key)
