"""Database functions for the ``knowledge_base`` table.

Chat prompts read approved entries from here, and analyzed documents can be
written back as new entries.
"""

import asyncio
from typing import Any, Dict, List, Optional

from supabase import Client

from hr_assistant.models.knowledge import KnowledgeEntry

_TABLE = "knowledge_base"


async def list_approved_knowledge(client: Client, limit: int = 10) -> List[Dict[str, Any]]:
    """Return up to ``limit`` approved entries for prompt context.

    Args:
        client: Supabase client instance
        limit: Maximum number of entries

    Returns:
        List of dicts with title, content, category and tags

    Raises:
        RuntimeError: If the query fails
    """
    if limit <= 0:
        return []

    try:
        response = await asyncio.to_thread(
            lambda: client.table(_TABLE)
            .select("title, content, category, tags")
            .eq("status", "approved")
            .limit(limit)
            .execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to load knowledge base: {str(e)}") from e

    return list(response.data or [])


async def search_knowledge(
    client: Client,
    search: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    """Search entries by title/content substring and category, newest first.

    Args:
        client: Supabase client instance
        search: Case-insensitive substring matched against title and content
        category: Exact category filter (``None`` or ``"all"`` disables it)
        limit: Maximum number of records to return (1-100)
        offset: Number of records to skip

    Returns:
        List of knowledge-base records

    Raises:
        ValueError: If limit or offset is out of range
        RuntimeError: If the query fails
    """
    if limit < 1 or limit > 100:
        raise ValueError("Limit must be between 1 and 100")
    if offset < 0:
        raise ValueError("Offset must be non-negative")

    def _query() -> Any:
        query = client.table(_TABLE).select("*").order("created_at", desc=True)
        if search:
            term = search.replace(",", " ").strip()
            query = query.or_(f"title.ilike.%{term}%,content.ilike.%{term}%")
        if category and category != "all":
            query = query.eq("category", category)
        return query.range(offset, offset + limit - 1).execute()

    try:
        response = await asyncio.to_thread(_query)
    except Exception as e:
        raise RuntimeError(f"Failed to search knowledge base: {str(e)}") from e

    return list(response.data or [])


async def create_knowledge_entry(client: Client, entry: KnowledgeEntry) -> str:
    """Insert a knowledge-base entry and return its id.

    Raises:
        RuntimeError: If the insert fails or returns no row
    """
    record = entry.model_dump(exclude_none=True)

    try:
        response = await asyncio.to_thread(
            lambda: client.table(_TABLE).insert(record).execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to insert knowledge entry: {str(e)}") from e

    if not response.data:
        raise RuntimeError("Failed to insert knowledge entry: insert returned no data")
    return str(response.data[0]["id"])
