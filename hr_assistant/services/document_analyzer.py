"""HR document analyzer with a deterministic keyword fallback.

The primary path asks OpenAI for a JSON analysis of the document. When the
answer cannot be decoded the result is built from keyword heuristics instead:

1. Category from ordered keyword groups over filename + content
2. Key points from the first long-enough sentences
3. Insights and recommendations from fixed templates

Every helper below except ``analyze_document`` is pure and never raises.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from openai import APIError, APIStatusError, AsyncOpenAI

from hr_assistant.config import get_settings
from hr_assistant.models.document_analysis import (
    DEFAULT_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    MAX_INSIGHTS,
    MAX_KEY_POINTS,
    MAX_RECOMMENDATIONS,
    AnalysisParseOutcome,
    DocumentAnalysisRequest,
    DocumentAnalysisResult,
    DocumentCategory,
    ParsedAnalysis,
    UnparseableAnalysis,
)
from hr_assistant.services.errors import LLMProviderError
from hr_assistant.services.openai_client import get_openai_client
from hr_assistant.utils.normalizers import (
    coerce_confidence,
    coerce_string_list,
    normalize_category,
    strip_code_fence,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fallback categorizer
# ---------------------------------------------------------------------------

# Checked in order; the first group with any hit wins.
_CATEGORY_KEYWORDS: list[tuple[DocumentCategory, tuple[str, ...]]] = [
    ("employment_law", ("employment", "labor", "law")),
    ("policy", ("policy", "procedure", "handbook")),
    ("recruitment", ("recruit", "hiring", "interview")),
    ("training", ("training", "development", "learning")),
    ("compliance", ("compliance", "audit", "regulation")),
    ("benefits", ("benefit", "compensation", "salary")),
]


def categorize_document(filename: str, content: str) -> DocumentCategory:
    """Assign a category by substring match against the keyword groups."""
    text = f"{filename or ''} {content or ''}".lower()

    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category

    return "general"


# ---------------------------------------------------------------------------
# Key points, insights, recommendations
# ---------------------------------------------------------------------------

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
# Measured in code points, so an emoji counts as one character.
_MIN_KEY_POINT_LENGTH = 20

_BASE_INSIGHTS = (
    "Document appears to contain important HR policy information",
    "May require regular review and updates based on changing regulations",
    "Could benefit from employee acknowledgment tracking",
)
REMOTE_WORK_INSIGHT = "Remote work policies detected - ensure compliance with local laws"
TERMINATION_INSIGHT = "Termination procedures identified - verify alignment with employment laws"

_RECOMMENDATIONS = (
    "Consider adding this to your knowledge base for team reference",
    "Schedule periodic review to ensure continued compliance",
    "Share with relevant stakeholders for feedback and implementation",
)


def extract_key_points(content: str) -> list[str]:
    """Return the first five sentences longer than 20 characters, trimmed."""
    sentences = [
        s.strip() for s in _SENTENCE_SPLIT.split(content or "")
        if len(s.strip()) > _MIN_KEY_POINT_LENGTH
    ]
    return sentences[:MAX_KEY_POINTS]


def generate_insights(content: str, limit: int = MAX_INSIGHTS) -> list[str]:
    """Return template insights, truncated to ``limit``.

    The remote-work and termination insights are appended after the three
    base insights, so with the default limit they are cut off. Pass a larger
    ``limit`` to surface them.
    """
    insights = list(_BASE_INSIGHTS)
    lower = (content or "").lower()

    if "remote" in lower:
        insights.append(REMOTE_WORK_INSIGHT)

    if "termination" in lower:
        insights.append(TERMINATION_INSIGHT)

    return insights[:limit]


def generate_recommendations(content: str) -> list[str]:
    """Return the fixed recommendation set; ``content`` is currently unused."""
    return list(_RECOMMENDATIONS)


def analyze_document_fallback(filename: str, content: str) -> DocumentAnalysisResult:
    """Build a complete result from keyword heuristics alone."""
    return DocumentAnalysisResult(
        category=categorize_document(filename, content),
        key_points=extract_key_points(content),
        insights=generate_insights(content),
        recommendations=generate_recommendations(content),
        confidence=FALLBACK_CONFIDENCE,
    )


# ---------------------------------------------------------------------------
# Parsing and normalization of the LLM answer
# ---------------------------------------------------------------------------

def parse_analysis_response(text: Optional[str]) -> AnalysisParseOutcome:
    """Decode the LLM answer into a tagged outcome.

    A JSON value that is not an object still counts as parsed, with no
    usable fields.
    """
    if not text or not text.strip():
        return UnparseableAnalysis(raw_text=text or "", reason="empty response")

    try:
        decoded = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        return UnparseableAnalysis(raw_text=text, reason=f"invalid JSON: {e.msg}")
    except (ValueError, RecursionError) as e:
        # Oversized integer literals or nesting deeper than the decoder allows
        return UnparseableAnalysis(raw_text=text, reason=f"invalid JSON: {e}")

    if not isinstance(decoded, dict):
        return ParsedAnalysis(payload={})

    return ParsedAnalysis(payload=decoded)


def normalize_analysis(
    outcome: AnalysisParseOutcome,
    filename: str,
    content: str,
) -> DocumentAnalysisResult:
    """Merge a parse outcome into a complete DocumentAnalysisResult.

    Unparseable answers use the fallback analysis (confidence 65). Parsed
    answers keep each usable field and recompute the missing ones; a missing
    confidence becomes 75.
    """
    if isinstance(outcome, UnparseableAnalysis):
        return analyze_document_fallback(filename, content)

    payload: Dict[str, Any] = outcome.payload

    category = normalize_category(payload.get("category"))
    if category is None:
        category = categorize_document(filename, content)

    key_points = coerce_string_list(payload.get("keyPoints"), MAX_KEY_POINTS)
    if key_points is None:
        key_points = coerce_string_list(payload.get("key_points"), MAX_KEY_POINTS)
    if key_points is None:
        key_points = extract_key_points(content)

    insights = coerce_string_list(payload.get("insights"), MAX_INSIGHTS)
    if insights is None:
        insights = generate_insights(content)

    recommendations = coerce_string_list(
        payload.get("recommendations"), MAX_RECOMMENDATIONS
    )
    if recommendations is None:
        recommendations = generate_recommendations(content)

    return DocumentAnalysisResult(
        category=category,
        key_points=key_points,
        insights=insights,
        recommendations=recommendations,
        confidence=coerce_confidence(payload.get("confidence"), DEFAULT_CONFIDENCE),
    )


# ---------------------------------------------------------------------------
# Primary path (OpenAI)
# ---------------------------------------------------------------------------

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert HR document analyzer. Analyze documents and provide "
    "structured insights in JSON format."
)


def build_analysis_prompt(filename: str, content: str, content_limit: int) -> str:
    """Build the user prompt with the taxonomy and a truncated content sample."""
    return (
        "Analyze this HR document and provide:\n"
        "1. Category (employment_law, policy, recruitment, training, compliance, "
        "benefits, or general)\n"
        "2. Key points (3-5 main points)\n"
        "3. Insights (2-3 AI-generated insights)\n"
        "4. Recommendations (2-3 actionable recommendations)\n"
        "5. Confidence score (0-100)\n\n"
        f"Document: {filename}\n"
        f"Content: {(content or '')[:content_limit]}"
    )


async def analyze_document(
    request: DocumentAnalysisRequest,
    openai_client: Optional[AsyncOpenAI] = None,
) -> DocumentAnalysisResult:
    """Analyze a document with OpenAI, falling back to keyword heuristics.

    Args:
        request: Filename, content and file type of the document.
        openai_client: Client to use; created from settings when omitted.

    Returns:
        DocumentAnalysisResult with every field populated.

    Raises:
        ProviderNotConfiguredError: If no OpenAI API key is configured.
        LLMProviderError: If the OpenAI request fails.
    """
    settings = get_settings()
    client = openai_client or get_openai_client()

    logger.info(f"Processing document: {request.filename}")

    try:
        response = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": build_analysis_prompt(
                        request.filename,
                        request.content,
                        settings.analysis_content_limit,
                    ),
                },
            ],
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
        )
    except APIStatusError as e:
        logger.error(f"OpenAI API error while analyzing {request.filename}: {e}")
        raise LLMProviderError("OpenAI", str(e), status_code=e.status_code) from e
    except APIError as e:
        logger.error(f"OpenAI API error while analyzing {request.filename}: {e}")
        raise LLMProviderError("OpenAI", str(e)) from e

    answer = response.choices[0].message.content if response.choices else None
    outcome = parse_analysis_response(answer)

    if isinstance(outcome, UnparseableAnalysis):
        logger.warning(
            f"Analysis of {request.filename} not parseable ({outcome.reason}); "
            "using keyword fallback"
        )

    result = normalize_analysis(outcome, request.filename, request.content)
    logger.info(
        f"Document processed: {request.filename} "
        f"category={result.category} confidence={result.confidence}"
    )
    return result
