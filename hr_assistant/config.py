"""Configuration management for the HR assistant service.

This module uses Pydantic Settings to load configuration from environment
variables. Supabase settings are validated at startup. LLM provider keys are
optional here and checked only when a provider client is requested, which
raises ProviderNotConfiguredError for a missing key.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All sensitive values (API keys, database credentials) must be
    provided via environment variables or .env file.
    """

    # Supabase Configuration
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anonymous key"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Service role key (bypasses RLS when set)"
    )

    # LLM Provider Configuration
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for document analysis and chat"
    )
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Google Gemini API key for chat"
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model used for analysis and chat"
    )
    gemini_model: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model used for chat"
    )

    # Document analysis
    analysis_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    analysis_max_tokens: int = Field(default=1500, ge=1)
    analysis_content_limit: int = Field(
        default=3000,
        ge=1,
        description="Characters of document content embedded in the analysis prompt"
    )

    # Chat
    chat_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    chat_max_tokens: int = Field(default=2000, ge=1)
    knowledge_context_limit: int = Field(
        default=10,
        ge=0,
        description="Approved knowledge-base entries injected into the chat prompt"
    )

    log_level: str = Field(default="INFO")

    # Model configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate that Supabase URL is present and properly formatted."""
        if not v or not v.strip():
            raise ValueError("SUPABASE_URL must be set in environment variables")

        url = v.strip()
        if not url.startswith("https://"):
            raise ValueError(
                "SUPABASE_URL must start with https:// "
                f"(got: {url[:20]}...)"
            )

        return url

    @field_validator("supabase_key")
    @classmethod
    def validate_supabase_key(cls, v: str) -> str:
        """Validate that Supabase key is present and non-empty."""
        if not v or not v.strip():
            raise ValueError("SUPABASE_KEY must be set in environment variables")
        return v.strip()

    @field_validator("supabase_service_role_key", "openai_api_key", "gemini_api_key")
    @classmethod
    def blank_key_is_unset(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty or whitespace-only optional keys as not configured."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level (got: {v})")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance.

    This function uses lru_cache to ensure settings are loaded only once
    and reused across the application lifetime.

    Returns:
        Settings: Validated application settings

    Raises:
        ValueError: If required environment variables are missing or invalid
    """
    return Settings()
