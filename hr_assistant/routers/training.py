"""Model training session endpoint."""

import logging

from fastapi import APIRouter, HTTPException, status

from hr_assistant.db.supabase_client import get_supabase_client
from hr_assistant.models.training import TrainingRequest, TrainingResponse
from hr_assistant.services.errors import TrainingDataError
from hr_assistant.services.training_service import run_training_session

router = APIRouter(prefix="/api", tags=["training"])
logger = logging.getLogger(__name__)


@router.post("/train-model", response_model=TrainingResponse, status_code=status.HTTP_200_OK)
async def train_model(body: TrainingRequest) -> TrainingResponse:
    """
    Record a training session from submitted input/output examples.

    Returns:
        200: ``{success, sessionId, processedCount}``
        400: No complete training example
        422: Invalid body (blank session name)
        500: Database error
    """
    try:
        return await run_training_session(body, get_supabase_client())
    except TrainingDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error in train-model: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
