"""
SEOgenix - AI Visibility Platform
Main FastAPI application entry point
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback
from typing import AsyncGenerator

from api.routes import (
    audits, content, entities, schema, summaries, citations, chatbot,
    sites, subscription, preferences
)
from shared.config import settings
from shared.database import get_supabase, init_db
from shared.errors import DEFAULT_FRIENDLY_MESSAGE, SEOgenixError
from shared.monitoring import fallback_snapshot, setup_monitoring
from shared.plans import catalog

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "*",
    "Access-Control-Allow-Headers": "*",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager"""
    logger.info("🚀 Starting SEOgenix...")

    # Initialize Supabase connection
    try:
        get_supabase()
        logger.info("✅ Supabase connected")
        await init_db()
    except Exception as e:
        logger.warning(f"⚠️ Supabase not configured, running in offline mode: {e}")

    setup_monitoring()
    logger.info(f"📋 Plan catalog loaded: {', '.join(t.value for t in catalog.plans)}")

    logger.info("🎯 SEOgenix is ready!")

    yield

    logger.info("👋 SEOgenix shutting down")


# Create FastAPI app
app = FastAPI(
    title="SEOgenix",
    description="AI visibility audits, schema generation, citation tracking and the Genie assistant",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,  # Must be False when allow_origins is "*"
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers - ensure CORS headers are always sent, even on crashes
@app.exception_handler(SEOgenixError)
async def seogenix_exception_handler(request: Request, exc: SEOgenixError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=CORS_HEADERS)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', []) if part != 'body')}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request body"
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {detail}", "message": "Please check your input and try again."},
        headers=CORS_HEADERS,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=CORS_HEADERS)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"error": str(exc), "message": DEFAULT_FRIENDLY_MESSAGE},
        headers=CORS_HEADERS,
    )


# Include routers
app.include_router(audits.router, prefix="/api/audits", tags=["audits"])
app.include_router(content.router, prefix="/api/content", tags=["content"])
app.include_router(entities.router, prefix="/api/entities", tags=["entities"])
app.include_router(schema.router, prefix="/api/schema", tags=["schema"])
app.include_router(summaries.router, prefix="/api/summaries", tags=["summaries"])
app.include_router(citations.router, prefix="/api/citations", tags=["citations"])
app.include_router(chatbot.router, prefix="/api/chatbot", tags=["chatbot"])
app.include_router(sites.router, prefix="/api/sites", tags=["sites"])
app.include_router(subscription.router, prefix="/api/subscription", tags=["subscription"])
app.include_router(preferences.router, prefix="/api/preferences", tags=["preferences"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "SEOgenix",
        "status": "operational",
        "version": "1.0.0",
        "agents": {
            "site_audit": "active",
            "competitor_analysis": "active",
            "content_analysis": "active",
            "prompt_generation": "active",
            "content_generation": "active",
            "entity_coverage": "active",
            "schema_generation": "active",
            "summary_generation": "active",
            "citation_tracking": "active",
            "chatbot": "active",
        },
        "fallbacks_served": fallback_snapshot(),
    }


@app.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "oracle": "configured" if settings.ANTHROPIC_API_KEY else "not configured",
        "database": "configured" if settings.SUPABASE_URL else "not configured",
        "monitoring": "active" if settings.SENTRY_DSN else "logging only",
        "fallbacks_served": fallback_snapshot(),
    }


if __name__ == "__main__":
    import uvicorn
    import os
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port, reload=settings.ENVIRONMENT == "development")
