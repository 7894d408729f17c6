"""HR assistant chat.

Builds an HR-expert system prompt, optionally enriched with approved
knowledge-base entries, and forwards the user's message to OpenAI or Gemini.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from openai import APIError, APIStatusError, AsyncOpenAI
from supabase import Client

from hr_assistant.config import get_settings
from hr_assistant.db.knowledge_base import list_approved_knowledge
from hr_assistant.models.chat import ChatRequest, ChatResponse
from hr_assistant.services.errors import LLMProviderError
from hr_assistant.services.gemini_client import get_gemini_client
from hr_assistant.services.openai_client import get_openai_client

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are an expert HR AI companion with deep knowledge of global employment laws, workplace culture, and HR best practices. You provide accurate, actionable advice while being professional and empathetic.

Key areas of expertise:
- Employment law and compliance across different regions
- Recruitment and talent acquisition strategies
- Performance management and employee development
- Workplace culture and employee engagement
- Conflict resolution and employee relations
- Compensation and benefits design
- Learning and development programs

Always provide practical, region-appropriate advice and cite relevant regulations when applicable."""


def build_knowledge_context(entries: List[Dict[str, Any]]) -> str:
    """Format knowledge-base rows as a prompt section ("" when there are none)."""
    if not entries:
        return ""

    blocks = []
    for entry in entries:
        tags = ", ".join(entry.get("tags") or [])
        blocks.append(
            f"Title: {entry.get('title', '')}\n"
            f"Category: {entry.get('category') or ''}\n"
            f"Content: {entry.get('content', '')}\n"
            f"Tags: {tags}"
        )
    return "\n\nRelevant HR Knowledge Base:\n" + "\n\n".join(blocks)


def build_system_prompt(knowledge_context: str = "") -> str:
    return SYSTEM_PROMPT + knowledge_context


async def _ask_openai(
    client: AsyncOpenAI, model: str, system_prompt: str, message: str
) -> str:
    settings = get_settings()
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
        )
    except APIStatusError as e:
        raise LLMProviderError("OpenAI", str(e), status_code=e.status_code) from e
    except APIError as e:
        raise LLMProviderError("OpenAI", str(e)) from e

    return response.choices[0].message.content or ""


async def _ask_gemini(
    client: genai.Client, model: str, system_prompt: str, message: str
) -> str:
    settings = get_settings()
    try:
        response = await asyncio.to_thread(
            lambda: client.models.generate_content(
                model=model,
                contents=f"{system_prompt}\n\nUser: {message}",
                config=types.GenerateContentConfig(
                    temperature=settings.chat_temperature,
                    max_output_tokens=settings.chat_max_tokens,
                ),
            )
        )
    except genai_errors.APIError as e:
        raise LLMProviderError("Gemini", str(e), status_code=e.code) from e

    return response.text or ""


async def generate_chat_reply(
    request: ChatRequest,
    supabase_client: Optional[Client] = None,
    openai_client: Optional[AsyncOpenAI] = None,
    gemini_client: Optional[genai.Client] = None,
) -> ChatResponse:
    """Answer an HR question with the requested provider.

    Args:
        request: Message, provider, optional model and knowledge-base flag
        supabase_client: Needed when ``include_knowledge_base`` is set
        openai_client: OpenAI client (created from settings when omitted)
        gemini_client: Gemini client (created from settings when omitted)

    Returns:
        ChatResponse with the model's answer and the provider used

    Raises:
        ProviderNotConfiguredError: If the provider's API key is missing
        LLMProviderError: If the provider call fails
        RuntimeError: If loading the knowledge base fails
    """
    settings = get_settings()
    logger.info(f"Processing chat request with provider: {request.provider}")

    knowledge_context = ""
    if request.include_knowledge_base and supabase_client is not None:
        entries = await list_approved_knowledge(
            supabase_client, limit=settings.knowledge_context_limit
        )
        knowledge_context = build_knowledge_context(entries)
        logger.debug(f"Injected {len(entries)} knowledge-base entries into chat prompt")

    system_prompt = build_system_prompt(knowledge_context)

    if request.provider == "gemini":
        gemini = gemini_client or get_gemini_client()
        answer = await _ask_gemini(
            gemini, request.model or settings.gemini_model, system_prompt, request.message
        )
    else:
        openai = openai_client or get_openai_client()
        answer = await _ask_openai(
            openai, request.model or settings.openai_model, system_prompt, request.message
        )

    return ChatResponse(response=answer, provider=request.provider)
