"""Request and response models for the HR chat endpoint."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ChatProvider = Literal["openai", "gemini"]


class ChatRequest(BaseModel):
    """A user message for the HR assistant."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1, description="User question")
    provider: ChatProvider = Field(default="openai", description="LLM provider")
    model: Optional[str] = Field(
        default=None,
        description="Provider model name; defaults to the configured model"
    )
    include_knowledge_base: bool = Field(
        default=True,
        alias="includeKnowledgeBase",
        description="Inject approved knowledge-base entries into the system prompt"
    )


class ChatResponse(BaseModel):
    response: str
    provider: ChatProvider
