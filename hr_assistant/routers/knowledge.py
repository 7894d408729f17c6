"""
Knowledge base API endpoints.

Provides search over HR knowledge articles and submission of new ones.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from hr_assistant.db.knowledge_base import create_knowledge_entry, search_knowledge
from hr_assistant.db.supabase_client import get_supabase_client
from hr_assistant.models.knowledge import KnowledgeEntry

router = APIRouter(prefix="/api", tags=["knowledge-base"])


@router.get("/knowledge", status_code=status.HTTP_200_OK)
async def list_knowledge(
    search: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    """
    Search knowledge-base entries, newest first.

    Args:
        search: Substring matched against title and content
        category: Category filter ("all" disables it)
        limit: Maximum number of records to return (default: 50, max: 100)
        offset: Number of records to skip for pagination (default: 0)

    Returns:
        200: Entries with pagination metadata
        400: Invalid pagination parameters
        500: Database error
    """
    if limit < 1 or limit > 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Limit must be between 1 and 100"
        )

    if offset < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Offset must be non-negative"
        )

    try:
        results = await search_knowledge(
            get_supabase_client(),
            search=search,
            category=category,
            limit=limit,
            offset=offset,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    return {
        "data": results,
        "pagination": {
            "limit": limit,
            "offset": offset,
            "count": len(results),
            "has_more": len(results) == limit
        }
    }


@router.post("/knowledge", status_code=status.HTTP_201_CREATED)
async def add_knowledge(body: KnowledgeEntry) -> dict:
    """
    Submit a knowledge-base entry for review.

    Returns:
        201: ``{"id": ...}`` of the created entry
        422: Missing title or content
        500: Database error
    """
    try:
        entry_id = await create_knowledge_entry(get_supabase_client(), body)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error: {str(e)}"
        )

    return {"id": entry_id}
