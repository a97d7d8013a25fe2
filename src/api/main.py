"""
FastAPI Application Setup

Main entry point for the GenRelay API application.

Responsibility:
    - FastAPI app initialization
    - Router registration (generations, apps, notifications)
    - CORS middleware configuration
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration

Contains:
    - create_app() factory function
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint: GET /health

Does NOT contain:
    - Business logic (delegated to Application Layer)
    - Direct Redis access (uses Infrastructure Layer)
    - Celery configuration (separate module)
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from http import HTTPStatus
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.routers import apps_router, generations_router, notifications_router
from src.api.schemas.common import ErrorResponse
from src.domain.shared.exceptions import (
    AppNotFoundError,
    DomainException,
    ExecutionNotAwaitingApprovalError,
    ExecutionNotFoundError,
    ForbiddenResourceError,
    GenerationNotFoundError,
    InvalidGenerationInputError,
    InvalidStatusTransitionError,
    ModelNotFoundError,
    UploadTooLargeError,
)
from src.infrastructure.persistence.redis import close_connections
from src.infrastructure.persistence.redis import health_check as redis_health_check

API_VERSION = "0.1.0"

# Configure logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Most specific first: (exception class, HTTP status, error code)
DOMAIN_ERROR_MAP = (
    (ModelNotFoundError, status.HTTP_404_NOT_FOUND, "MODEL_NOT_FOUND"),
    (AppNotFoundError, status.HTTP_404_NOT_FOUND, "APP_NOT_FOUND"),
    (GenerationNotFoundError, status.HTTP_404_NOT_FOUND, "GENERATION_NOT_FOUND"),
    (ExecutionNotFoundError, status.HTTP_404_NOT_FOUND, "EXECUTION_NOT_FOUND"),
    (ForbiddenResourceError, status.HTTP_403_FORBIDDEN, "FORBIDDEN"),
    (
        ExecutionNotAwaitingApprovalError,
        status.HTTP_409_CONFLICT,
        "EXECUTION_NOT_AWAITING_APPROVAL",
    ),
    (UploadTooLargeError, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "FILE_TOO_LARGE"),
    (
        InvalidGenerationInputError,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "INVALID_GENERATION_INPUT",
    ),
    (InvalidStatusTransitionError, status.HTTP_409_CONFLICT, "INVALID_STATUS_TRANSITION"),
)


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: Health status (always "ok" if endpoint responds)
        redis: "ok" or "unavailable"
        version: API version
        timestamp: Unix timestamp of health check
    """

    status: str = "ok"
    redis: str = "ok"
    version: str = API_VERSION
    timestamp: float


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Request logging middleware.

    Logs all incoming requests with method, path, status code, and duration.

    Logging Format:
        INFO: "Incoming request: POST /api/models/flux-dev/generate"
        INFO: "Request completed: POST /api/models/flux-dev/generate - 202 - 0.031s"
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )

    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def _error_response(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(error))


def _domain_error_details(exc: DomainException) -> dict:
    details = {"exception_type": exc.__class__.__name__}
    if isinstance(exc, UploadTooLargeError):
        details["file_size_bytes"] = exc.file_size_bytes
        details["max_size_bytes"] = exc.max_size_bytes
    elif isinstance(exc, ForbiddenResourceError):
        details["resource"] = exc.resource
        details["resource_id"] = exc.resource_id
    elif isinstance(exc, ExecutionNotAwaitingApprovalError):
        details["status"] = exc.status
    elif isinstance(exc, InvalidGenerationInputError) and exc.field_name:
        details["field_name"] = exc.field_name
    return details


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Catches all DomainException subclasses and converts them to
    appropriate HTTP error responses with consistent ErrorResponse format.

    Mapping:
        - ModelNotFoundError, AppNotFoundError -> 404 Not Found
        - GenerationNotFoundError, ExecutionNotFoundError -> 404 Not Found
        - ForbiddenResourceError -> 403 Forbidden (never a 5xx)
        - ExecutionNotAwaitingApprovalError -> 409 Conflict
        - InvalidStatusTransitionError -> 409 Conflict
        - UploadTooLargeError -> 413 Payload Too Large
        - InvalidGenerationInputError -> 422 Unprocessable Entity
        - Other DomainException -> 400 Bad Request

    Examples:
        >>> raise GenerationNotFoundError(42)
        >>> # Returns: 404 {"code": "GENERATION_NOT_FOUND", "message": "...", "details": {...}}
    """
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "DOMAIN_ERROR"
    for exc_type, mapped_status, mapped_code in DOMAIN_ERROR_MAP:
        if isinstance(exc, exc_type):
            status_code, error_code = mapped_status, mapped_code
            break

    error_response = ErrorResponse(
        code=error_code,
        message=exc.message,
        details=_domain_error_details(exc),
    )

    logger.warning(
        f"Domain exception: {exc.__class__.__name__} - {exc.message} - "
        f"Request: {request.method} {request.url.path}"
    )

    return _error_response(status_code, error_response)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTPException (401 from the auth dependency, unknown routes) as ErrorResponse."""
    try:
        error_code = HTTPStatus(exc.status_code).phrase.upper().replace(" ", "_")
    except ValueError:
        error_code = "HTTP_ERROR"

    error_response = ErrorResponse(
        code=error_code,
        message=str(exc.detail),
        details=None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_response),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error_response = ErrorResponse(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details={"errors": exc.errors()},
    )

    logger.warning(
        f"Validation error - Request: {request.method} {request.url.path}"
    )

    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, error_response)


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unexpected exceptions.

    Catches all unhandled exceptions and converts to 500 Internal Server Error.
    Logs full stack trace for debugging.
    """
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc), "type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error_response)


# ============================================================================
# APP FACTORY
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_connections()


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Configuration:
        - Title: GenRelay API
        - CORS: Allow all origins (development mode)
        - Routers: /api/models, /api/generations, /api/apps, /ws/notifications
        - Media: uploaded inputs served under /media when MEDIA_ROOT exists
        - Health: GET /health

    Usage:
        >>> app = create_app()
        >>> # uvicorn src.api.main:app --reload
    """
    app = FastAPI(
        title="GenRelay API",
        version=API_VERSION,
        description=(
            "Queue AI model generations and multi-step apps, then receive "
            "completion notifications over WebSocket."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Production: restrict to specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(request_logging_middleware)

    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(generations_router, prefix="/api")
    app.include_router(apps_router, prefix="/api")
    app.include_router(notifications_router)

    media_root = Path(os.getenv("MEDIA_ROOT", "/tmp/genrelay/media"))
    if media_root.is_dir():
        app.mount("/media", StaticFiles(directory=media_root), name="media")
        logger.info(f"Serving uploaded media from {media_root}")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        description="Simple health check for monitoring and load balancers",
        tags=["health"],
    )
    async def health_check() -> HealthCheckResponse:
        redis_ok = await run_in_threadpool(redis_health_check)
        return HealthCheckResponse(
            status="ok",
            redis="ok" if redis_ok else "unavailable",
            version=API_VERSION,
            timestamp=time.time(),
        )

    logger.info("FastAPI application created successfully")
    logger.info("Registered routers: /api/models, /api/generations, /api/apps, /ws/notifications")

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn src.api.main:app --reload
app = create_app()
