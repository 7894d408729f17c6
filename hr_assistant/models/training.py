"""Models for AI training sessions.

A training session stores organisation-specific question/answer pairs
with their category so they can later be used for prompting or fine-tuning.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrainingExample(BaseModel):
    """One input/output pair supplied by an HR professional."""

    input: str = ""
    output: str = ""
    category: str = "general"


class TrainingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_name: str = Field(..., alias="sessionName")
    training_data: list[TrainingExample] = Field(
        default_factory=list,
        alias="trainingData"
    )
    provider: Literal["openai", "gemini"] = "openai"

    @field_validator("session_name")
    @classmethod
    def validate_session_name(cls, v: str) -> str:
        """Reject blank session names."""
        if not v or not v.strip():
            raise ValueError("Please provide a session name")
        return v.strip()


class TrainingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    session_id: str = Field(alias="sessionId")
    processed_count: int = Field(alias="processedCount")
