"""Shared Supabase client for the knowledge_base and training_sessions tables.

The service-role key is used when configured so backend handlers can read
every approved knowledge-base row regardless of RLS; otherwise the anon key.
"""

import threading

from supabase import Client, create_client

from hr_assistant.config import get_settings

_client: Client | None = None
_lock = threading.Lock()


def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client, creating it on first use.

    Raises:
        ValueError: If the client cannot be created from SUPABASE_URL and the key
    """
    global _client
    if _client is not None:
        return _client
    with _lock:
        if _client is not None:
            return _client
        settings = get_settings()
        key = settings.supabase_service_role_key or settings.supabase_key
        try:
            _client = create_client(settings.supabase_url, key)
        except Exception as e:
            raise ValueError(f"Failed to create Supabase client: {str(e)}") from e
        return _client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _client
    with _lock:
        _client = None
