"""FastAPI application for the HR assistant service."""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Union

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from hr_assistant.config import get_settings
from hr_assistant.db.supabase_client import get_supabase_client
from hr_assistant.middleware.logging import RequestLoggingMiddleware, configure_logging
from hr_assistant.middleware.request_id import RequestIDMiddleware
from hr_assistant.routers import chat, documents, knowledge, training
from hr_assistant.services.gemini_client import get_gemini_client
from hr_assistant.services.openai_client import get_openai_client

# Application metadata
VERSION = "1.0.0"
COMMIT_HASH = "development"  # This can be set via environment variable or build process

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan event handler for startup and shutdown."""
    try:
        # Raises ValidationError if required env vars are missing
        settings = get_settings()
        configure_logging(settings.log_level)

        logger.info(f"Starting HR Assistant API v{VERSION}")
        logger.info(f"OpenAI model: {settings.openai_model} (configured: {bool(settings.openai_api_key)})")
        logger.info(f"Gemini model: {settings.gemini_model} (configured: {bool(settings.gemini_api_key)})")
        logger.info("Environment validation: OK")

    except Exception as e:
        logger.error(f"Startup validation failed: {e}")
        raise

    yield

    logger.info("Shutting down HR Assistant API")


app = FastAPI(
    title="HR Assistant API",
    description="HR document analysis, AI chat, knowledge base and training sessions",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Logging wraps request-id assignment, so request-id runs first (added last)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=None)
async def health_check() -> Union[Dict[str, Any], Response]:
    """
    Health check endpoint that verifies all required services are operational.

    Returns:
        JSON response with overall status and individual service statuses.

    Status Codes:
        200: All services healthy
        503: One or more services unavailable
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    services: Dict[str, str] = {}
    overall_healthy = True

    for name, factory in (("openai_api", get_openai_client), ("gemini_api", get_gemini_client)):
        try:
            client = factory()
            if client:
                services[name] = "healthy"
            else:
                services[name] = "unhealthy: client is None"
                overall_healthy = False
        except Exception as e:
            services[name] = f"unhealthy: {str(e)}"
            overall_healthy = False

    try:
        supabase_client = get_supabase_client()
        response = supabase_client.table("knowledge_base").select("id").limit(1).execute()
        if response is not None:
            services["supabase"] = "healthy"
        else:
            services["supabase"] = "unhealthy: no response"
            overall_healthy = False
    except Exception as e:
        services["supabase"] = f"unhealthy: {str(e)}"
        overall_healthy = False

    response_data: Dict[str, Any] = {
        "status": "healthy" if overall_healthy else "unhealthy",
        "timestamp": timestamp,
        "services": services,
    }

    if not overall_healthy:
        return Response(
            content=json.dumps(response_data),
            status_code=503,
            media_type="application/json",
        )

    return response_data


@app.get("/version")
async def version_info() -> Dict[str, str]:
    """
    Get version information for the API.

    Returns:
        JSON with version number and commit hash.
    """
    return {
        "version": VERSION,
        "commit_hash": COMMIT_HASH,
    }


app.include_router(documents.router)
app.include_router(chat.router)
app.include_router(training.router)
app.include_router(knowledge.router)
