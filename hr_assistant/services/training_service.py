"""Training-session processing.

Examples are validated, tagged with a category and timestamp, and stored
on a ``training_sessions`` row together with summary metrics.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from hr_assistant.config import get_settings
from hr_assistant.db.training_sessions import (
    complete_training_session,
    create_training_session,
    fail_training_session,
)
from hr_assistant.models.training import TrainingExample, TrainingRequest, TrainingResponse
from hr_assistant.services.errors import TrainingDataError

logger = logging.getLogger(__name__)


def filter_valid_examples(examples: List[TrainingExample]) -> List[TrainingExample]:
    """Keep examples whose input and output are both non-blank.

    Raises:
        TrainingDataError: If no example survives.
    """
    valid = [e for e in examples if e.input.strip() and e.output.strip()]
    if not valid:
        raise TrainingDataError("Please provide at least one complete training example")
    return valid


def process_training_data(
    examples: List[TrainingExample], processed_at: str
) -> List[Dict[str, Any]]:
    return [
        {
            "input": e.input,
            "output": e.output,
            "category": e.category or "general",
            "processed_at": processed_at,
        }
        for e in examples
    ]


def build_performance_metrics(
    processed: List[Dict[str, Any]], processed_at: str
) -> Dict[str, Any]:
    """Summarize a processed batch: count and distinct categories."""
    return {
        "data_points": len(processed),
        "categories": sorted({item["category"] for item in processed}),
        "processed_at": processed_at,
    }


def model_version_for(provider: str) -> str:
    settings = get_settings()
    return settings.openai_model if provider == "openai" else settings.gemini_model


async def run_training_session(
    request: TrainingRequest,
    client: Client,
    trained_by: Optional[str] = None,
) -> TrainingResponse:
    """Create, process and complete a training session.

    Args:
        request: Session name, examples and target provider
        client: Supabase client instance
        trained_by: Optional id of the submitting user

    Returns:
        TrainingResponse with the session id and processed example count

    Raises:
        TrainingDataError: If no complete example was submitted
        RuntimeError: If a database operation fails
    """
    examples = filter_valid_examples(request.training_data)
    raw = [e.model_dump() for e in examples]

    session_id = await create_training_session(
        client,
        session_name=request.session_name,
        training_data=raw,
        model_version=model_version_for(request.provider),
        trained_by=trained_by,
    )
    logger.info(f"Training session {session_id} started with {len(examples)} examples")

    processed_at = datetime.now(timezone.utc).isoformat()
    processed = process_training_data(examples, processed_at)

    try:
        await complete_training_session(
            client,
            session_id,
            training_data={"examples": raw, "processed": processed},
            performance_metrics=build_performance_metrics(processed, processed_at),
            completed_at=processed_at,
        )
    except RuntimeError as e:
        logger.error(f"Training session {session_id} failed: {e}")
        try:
            await fail_training_session(client, session_id, str(e))
        except RuntimeError as mark_error:
            logger.error(f"Could not mark session {session_id} as failed: {mark_error}")
        raise

    logger.info(f"Training session {session_id} completed")
    return TrainingResponse(
        success=True,
        session_id=session_id,
        processed_count=len(processed),
    )
