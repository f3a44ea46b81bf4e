"""
FastAPI application for StudySpark.

Provides REST API for:
- Quiz generation, summaries, topic extraction and chat (Gemini proxy)
- Quiz feedback with locally verified scores
- Per-document topic coverage
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from src.core.errors import ValidationError
from src.core.log_setup import configure_logging
from src.db.database import init_db

settings = get_settings()

SERVICE_NAME = "studyspark"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    configure_logging(settings)
    logger.info("Starting StudySpark service...")
    if settings.state_backend == "sql":
        init_db()
    if not settings.has_ai_configured():
        logger.warning("GEMINI_API_KEY is not set; generation endpoints will fail")
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info("Shutting down StudySpark service...")


app = FastAPI(
    title="StudySpark",
    description="""
    Study assistant backend proxying a large language model.

    ## Features

    - **Quiz**: 4-option multiple-choice quizzes generated from notes
    - **Feedback**: Local scoring, model explanations, mismatch detection
    - **Summary / Topics**: Structured summaries and topic lists
    - **Progress**: Per-document topic coverage
    - **Chat**: Academic assistant
    """,
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

# CORS middleware for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========================================
# Error Responses
# ========================================


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors (400), not 422."""
    logger.debug(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with component configuration status."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "ai": "configured" if settings.has_ai_configured() else "not_configured",
            "state": settings.state_backend,
        },
    }


@app.get("/config", tags=["Health"])
def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive)."""
    return {
        "ai": settings.get_gateway_config(),
        "quiz": {"question_count": settings.quiz_question_count},
        "state": settings.get_state_config(),
    }


# ========================================
# Import and mount routers
# ========================================

from src.api.routers import progress_router, study_router

app.include_router(study_router.router, prefix="/api", tags=["Study"])
app.include_router(progress_router.router, prefix="/api/progress", tags=["Progress"])


def run_server(host: str | None = None, port: int | None = None, reload: bool = False) -> None:
    """Serve the app with uvicorn (defaults from config)."""
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
