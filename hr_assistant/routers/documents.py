"""
Document analysis API endpoints.

Accepts already-decoded document text and returns its HR category, key
points, insights, recommendations and a confidence score.
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from hr_assistant.db.knowledge_base import create_knowledge_entry
from hr_assistant.db.supabase_client import get_supabase_client
from hr_assistant.models.document_analysis import DocumentAnalysisRequest, DocumentAnalysisResult
from hr_assistant.models.knowledge import KnowledgeEntry
from hr_assistant.services.document_analyzer import analyze_document
from hr_assistant.services.errors import LLMProviderError, ProviderNotConfiguredError

router = APIRouter(prefix="/api", tags=["documents"])
logger = logging.getLogger(__name__)


@router.post(
    "/process-document",
    response_model=DocumentAnalysisResult,
    status_code=status.HTTP_200_OK,
)
async def process_document(
    body: DocumentAnalysisRequest,
    response: Response,
) -> DocumentAnalysisResult:
    """
    Analyze an HR document.

    The document is sent to OpenAI for a structured analysis. If the answer
    cannot be parsed, keyword heuristics produce the result instead
    (confidence 65).

    Returns:
        200: Analysis result (camelCase keys)
        422: Malformed request body
        502: OpenAI request failed
        503: OpenAI API key not configured
        500: Unexpected error

    Raises:
        HTTPException: Various error conditions with appropriate status codes
    """
    try:
        result = await analyze_document(body)
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
        logger.error(f"Error processing document {body.filename}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Document processing failed: {str(e)}"
        )

    response.headers["X-Document-Category"] = result.category
    response.headers["X-Document-Confidence"] = str(result.confidence)

    if body.add_to_knowledge_base:
        try:
            entry_id = await create_knowledge_entry(
                get_supabase_client(),
                KnowledgeEntry.from_analysis(body.filename, result),
            )
            response.headers["X-Knowledge-Entry-ID"] = entry_id
        except (RuntimeError, ValueError) as e:
            # The analysis itself succeeded; report it without the stored entry.
            logger.error(f"Failed to add {body.filename} to knowledge base: {e}")

    return result
