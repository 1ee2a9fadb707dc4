"""
FinePrint - Contract Term Extraction & Risk Analysis
====================================================
Main FastAPI application entry point.

This application provides:
- Document upload and text extraction (PDF, DOCX, images)
- Contract field extraction and CSV export
- Fine-grained term scanning
- Clause classification with LLM and heuristic fallback
- Risk scoring and summaries

Version: 1.0.0
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import analyze_router, extract_router, upload_router
from core.config import get_settings
from schemas import HealthCheckResponse

VERSION = "1.0.0"

# === Configuration ===
settings = get_settings()


# === Logging Setup ===
def setup_logging():
    """Configure structured logging."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


setup_logging()
logger = structlog.get_logger(__name__)


# === Lifespan Management ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info("Starting FinePrint API", version=VERSION)

    if settings.llm_configured:
        logger.info("LLM clause classification enabled", model=settings.llm_model)
    else:
        logger.warning("LLM clause classification not configured, using heuristic analysis")

    yield

    logger.info("Shutting down FinePrint API")


# === Application Setup ===
app = FastAPI(
    title="FinePrint API",
    description="""
    ## Contract Term Extraction & Risk Analysis

    FinePrint reads legal contracts and:

    - **Extracts** text from PDF, DOCX and image files
    - **Finds** contract fields: dates, amounts, parties, key clauses
    - **Scans** amounts, dates, sections, percentages and references
    - **Classifies** clauses and their risk factors
    - **Scores** overall document risk on a 0-100 scale

    ### API Flow

    1. `POST /upload` - Upload a document and get its contract terms
    2. `POST /extract` - Extract contract terms from text
    3. `POST /analyze` - Get the risk analysis of a document's text
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)


# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",  # Vite dev server
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Exception Handlers ===
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception("Unhandled exception", path=request.url.path, error=str(exc))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred. Please try again.",
            "details": {"path": request.url.path} if settings.debug else None
        }
    )


# === Health Check ===
@app.get(
    "/health",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running and how clauses will be classified."
)
async def health_check() -> HealthCheckResponse:
    """Return the status of the API and dependent services."""
    services = {
        "api": "healthy",
        "llm": "configured" if settings.llm_configured else "not_configured",
    }

    return HealthCheckResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.utcnow(),
        services=services
    )


@app.get(
    "/",
    tags=["Health"],
    summary="Root endpoint",
    description="Welcome message and API information."
)
async def root():
    """Root endpoint with welcome message."""
    return {
        "name": "FinePrint API",
        "version": VERSION,
        "description": "Contract term extraction and risk analysis",
        "docs": "/docs",
        "health": "/health"
    }


# === Register Routers ===
app.include_router(upload_router)
app.include_router(extract_router)
app.include_router(analyze_router)


# === Main Entry Point ===
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
