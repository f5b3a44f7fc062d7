"""FastAPI application for Draftboard.

This module provides the main FastAPI application with health endpoints,
API routes, domain error mapping, and lifecycle management.

Run with:
    uvicorn draftboard.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

    >>> # List posts
    >>> curl -H "Authorization: Bearer $TOKEN" http://localhost:8000/api/v1/posts

Tests:
    - tests/integration/test_api_posts.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from draftboard import __version__
from draftboard.api.v1 import router as v1_router
from draftboard.config import get_settings
from draftboard.database import check_db_connection, close_db, init_db
from draftboard.errors import BackendUnavailable, NotFound, OwnerRequired, ValidationError
from draftboard.storage.errors import BlobStoreError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Response models
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
    storage_backend: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: str | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Creates tables on startup and disposes the engine on shutdown.
    """
    logger.info(f"Starting Draftboard v{__version__}")

    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        # Continue anyway - schema may be managed by alembic

    yield

    logger.info("Shutting down Draftboard")
    await close_db()


settings = get_settings()

app = FastAPI(
    title="Draftboard",
    description="Owner-scoped posts with managed image attachments",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)


def _error(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail, "detail": None},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", str(exc))


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return _error(status.HTTP_404_NOT_FOUND, "Not found", str(exc))


@app.exception_handler(OwnerRequired)
async def owner_required_handler(request: Request, exc: OwnerRequired):
    return _error(status.HTTP_401_UNAUTHORIZED, "Authentication required", str(exc))


@app.exception_handler(BackendUnavailable)
async def backend_unavailable_handler(request: Request, exc: BackendUnavailable):
    """Storage or database failures surface as 503 so clients may retry."""
    logger.warning(f"Backend unavailable: {exc}")
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Backend unavailable", "Please try again")


@app.exception_handler(BlobStoreError)
async def blob_store_error_handler(request: Request, exc: BlobStoreError):
    logger.warning(f"Blob store error: {exc}")
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Backend unavailable", "Please try again")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    detail = str(exc) if settings.DEBUG else None
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", detail)


# Health endpoints
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check application health.

    Returns:
        HealthResponse with database status and the configured blob backend.
    """
    db_healthy = await check_db_connection()

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=__version__,
        database=db_healthy,
        storage_backend=settings.STORAGE_BACKEND.value,
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic info."""
    return {
        "name": "Draftboard",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "draftboard.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
