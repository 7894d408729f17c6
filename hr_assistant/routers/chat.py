"""HR assistant chat endpoint."""

import logging

from fastapi import APIRouter, HTTPException, status

from hr_assistant.db.supabase_client import get_supabase_client
from hr_assistant.models.chat import ChatRequest, ChatResponse
from hr_assistant.services.chat_service import generate_chat_reply
from hr_assistant.services.errors import LLMProviderError, ProviderNotConfiguredError

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)


@router.post("/ai-chat", response_model=ChatResponse, status_code=status.HTTP_200_OK)
async def ai_chat(body: ChatRequest) -> ChatResponse:
    """
    Answer an HR question with OpenAI or Gemini.

    Returns:
        200: Model answer and provider
        422: Invalid body (empty message or unknown provider)
        502: Provider request failed
        503: Provider API key not configured
        500: Knowledge-base or unexpected error
    """
    try:
        supabase_client = get_supabase_client() if body.include_knowledge_base else None
        return await generate_chat_reply(body, supabase_client=supabase_client)
    except ProviderNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    except LLMProviderError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error in ai-chat: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )
