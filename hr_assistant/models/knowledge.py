"""Pydantic models for knowledge-base entries."""

from typing import Optional

from pydantic import BaseModel, Field

from hr_assistant.models.document_analysis import DocumentAnalysisResult


class KnowledgeEntry(BaseModel):
    """A knowledge-base article as inserted into the ``knowledge_base`` table."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: Optional[str] = None
    content_type: str = Field(default="text", description="text, document, link, ...")
    source_url: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    status: Optional[str] = Field(
        default=None,
        description="Review status; left to the database default (pending) when unset"
    )
    created_by: Optional[str] = None

    @classmethod
    def from_analysis(cls, filename: str, result: DocumentAnalysisResult) -> "KnowledgeEntry":
        """Build the entry stored for an auto-processed document."""
        return cls(
            title=f"Processed: {filename or 'untitled'}",
            content="\n\n".join(result.key_points) or "(no key points extracted)",
            category=result.category,
            content_type="document",
            tags=[result.category, "auto-processed"],
        )
