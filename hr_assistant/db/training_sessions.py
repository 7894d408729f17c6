"""Database functions for the ``training_sessions`` table."""

import asyncio
from typing import Any, Dict, Optional

from supabase import Client

_TABLE = "training_sessions"


async def create_training_session(
    client: Client,
    session_name: str,
    training_data: Any,
    model_version: str,
    trained_by: Optional[str] = None,
) -> str:
    """Insert an ``in_progress`` training session.

    Args:
        client: Supabase client instance
        session_name: Human-readable session name
        training_data: Raw examples as submitted (JSON-serializable)
        model_version: Model the examples are meant for
        trained_by: Optional user id

    Returns:
        str: UUID of the created session

    Raises:
        RuntimeError: If the insert fails
    """
    record: Dict[str, Any] = {
        "session_name": session_name,
        "training_data": training_data,
        "model_version": model_version,
        "status": "in_progress",
    }
    if trained_by:
        record["trained_by"] = trained_by

    try:
        response = await asyncio.to_thread(
            lambda: client.table(_TABLE).insert(record).execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to create training session: {str(e)}") from e

    if not response.data:
        raise RuntimeError("Failed to create training session: insert returned no data")
    return str(response.data[0]["id"])


async def complete_training_session(
    client: Client,
    session_id: str,
    training_data: Any,
    performance_metrics: Dict[str, Any],
    completed_at: str,
) -> None:
    """Mark a session ``completed`` and store processed data and metrics.

    Raises:
        RuntimeError: If the update fails
    """
    update = {
        "training_data": training_data,
        "status": "completed",
        "completed_at": completed_at,
        "performance_metrics": performance_metrics,
    }

    try:
        await asyncio.to_thread(
            lambda: client.table(_TABLE).update(update).eq("id", session_id).execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to update training session {session_id}: {str(e)}") from e


async def fail_training_session(client: Client, session_id: str, error_message: str) -> None:
    """Mark a session ``failed``; the error goes into performance_metrics."""
    update = {"status": "failed", "performance_metrics": {"error": error_message}}

    try:
        await asyncio.to_thread(
            lambda: client.table(_TABLE).update(update).eq("id", session_id).execute()
        )
    except Exception as e:
        raise RuntimeError(f"Failed to update training session {session_id}: {str(e)}") from e
