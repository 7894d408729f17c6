"""Pydantic models for HR document analysis.

A document is analyzed once per request and produces a
DocumentAnalysisResult. The HTTP boundary speaks camelCase
(``keyPoints``, ``fileType``) so both spellings are accepted on input.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

DocumentCategory = Literal[
    "employment_law",
    "policy",
    "recruitment",
    "training",
    "compliance",
    "benefits",
    "general",
]

DOCUMENT_CATEGORIES: Tuple[str, ...] = (
    "employment_law",
    "policy",
    "recruitment",
    "training",
    "compliance",
    "benefits",
    "general",
)

MAX_KEY_POINTS = 5
MAX_INSIGHTS = 3
MAX_RECOMMENDATIONS = 3

FALLBACK_CONFIDENCE = 65
DEFAULT_CONFIDENCE = 75


class DocumentAnalysisRequest(BaseModel):
    """A document submitted for analysis.

    ``content`` is text already decoded by the caller; ``file_type`` is a
    MIME hint that the classifier does not use.
    """

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(default="", description="Name of the uploaded file")
    content: str = Field(default="", description="Raw text of the document")
    file_type: str = Field(
        default="",
        alias="fileType",
        description="MIME type reported by the uploader"
    )
    add_to_knowledge_base: bool = Field(
        default=False,
        alias="addToKnowledgeBase",
        description="Store the key points as a knowledge-base entry after analysis"
    )


class DocumentAnalysisResult(BaseModel):
    """Fixed-shape analysis output returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    category: DocumentCategory = Field(description="Assigned HR category")
    key_points: list[str] = Field(
        default_factory=list,
        alias="keyPoints",
        max_length=MAX_KEY_POINTS,
        description="Up to five sentences lifted from the document"
    )
    insights: list[str] = Field(default_factory=list, max_length=MAX_INSIGHTS)
    recommendations: list[str] = Field(
        default_factory=list,
        max_length=MAX_RECOMMENDATIONS
    )
    confidence: int = Field(ge=0, le=100, description="Confidence score (0-100)")


@dataclass(frozen=True)
class ParsedAnalysis:
    """The LLM answer decoded into a (possibly partial) JSON object."""

    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UnparseableAnalysis:
    """The LLM answer could not be decoded; the keyword fallback applies."""

    raw_text: str = ""
    reason: str = ""


AnalysisParseOutcome = Union[ParsedAnalysis, UnparseableAnalysis]
