"""
FastAPI Application Setup

Main entry point for the HVAC CRM API application.

Responsibility:
    - FastAPI app initialization
    - Router registration (compliance, quotes, equipment, tickets, search, dashboard)
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
    - Business logic (delegated to Domain/Application Layers)
    - Celery configuration (separate module)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hvac_crm import __version__
from hvac_crm.api.dependencies import reset_dependencies
from hvac_crm.api.routers import (
    compliance_router,
    dashboard_router,
    equipment_router,
    quotes_router,
    search_router,
    tickets_router,
)
from hvac_crm.api.schemas.common import ErrorResponse
from hvac_crm.domain.shared.exceptions import (
    DomainException,
    EntityNotFoundError,
    FeatureDisabledError,
    InsufficientPermissionsError,
    InvalidStatusTransitionError,
    InvalidTaxIdentifierError,
)
from hvac_crm.infrastructure.hvac_api import HvacApiError
from hvac_crm.infrastructure.persistence.redis import close_connections
from hvac_crm.infrastructure.persistence.redis import health_check as redis_health_check

# Configure logger
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: Health status (always "ok" if endpoint responds)
        version: API version
        timestamp: Unix timestamp of health check
        redis: True if Redis answered PING
    """

    status: str = "ok"
    version: str = __version__
    timestamp: float
    redis: bool


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Request logging middleware.

    Logging Format:
        INFO: "Incoming request: GET /api/equipment"
        INFO: "Request completed: GET /api/equipment - 200 - 0.123s"
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


def _error_details(exc: DomainException) -> dict:
    details = {"exception_type": exc.__class__.__name__}
    if isinstance(exc, EntityNotFoundError):
        details.update(entity_type=exc.entity_type, entity_id=exc.entity_id)
    elif isinstance(exc, InvalidTaxIdentifierError):
        details.update(identifier_type=exc.identifier_type, errors=list(exc.errors))
    elif isinstance(exc, InvalidStatusTransitionError):
        details.update(current_status=exc.current_status, requested_status=exc.requested_status)
    elif isinstance(exc, InsufficientPermissionsError):
        details.update(required=list(exc.required))
    elif isinstance(exc, FeatureDisabledError):
        details.update(features=list(exc.features))
    return details


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Mapping:
        - EntityNotFoundError -> 404 Not Found
        - InsufficientPermissionsError -> 403 Forbidden
        - FeatureDisabledError -> 403 Forbidden
        - Other DomainException -> 400 Bad Request

    Examples:
        >>> raise EntityNotFoundError("Equipment eq-1 not found", "equipment", "eq-1")
        >>> # Returns: 404 {"code": "ENTITY_NOT_FOUND", "message": "...", "details": {...}}
    """
    if isinstance(exc, EntityNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        error_code = "ENTITY_NOT_FOUND"
    elif isinstance(exc, InsufficientPermissionsError):
        status_code = status.HTTP_403_FORBIDDEN
        error_code = "INSUFFICIENT_PERMISSIONS"
    elif isinstance(exc, FeatureDisabledError):
        status_code = status.HTTP_403_FORBIDDEN
        error_code = "FEATURE_DISABLED"
    else:
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = exc.__class__.__name__.replace("Error", "").upper()

    error_response = ErrorResponse(
        code=error_code,
        message=exc.message,
        details=_error_details(exc),
    )

    logger.warning(
        f"Domain exception: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(status_code=status_code, content=error_response.model_dump())


async def hvac_api_exception_handler(request: Request, exc: HvacApiError):
    """
    Global exception handler for HVAC API failures.

    Upstream status code is passed through (404 from HVAC API stays 404,
    timeouts are 408, network failures 503).
    """
    error_response = ErrorResponse(
        code="HVAC_API_ERROR",
        message=exc.message,
        details={"exception_type": exc.__class__.__name__, "upstream": exc.details},
    )

    logger.error(
        f"HVAC API error: {exc} - Request: {request.method} {request.url.path}"
    )

    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump())


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

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


# ============================================================================
# APP FACTORY
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release HVAC API, Weaviate and Redis connections on shutdown."""
    yield
    reset_dependencies()
    close_connections()
    logger.info("HVAC CRM API shut down, connections closed")


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Configuration:
        - Title: HVAC CRM API
        - CORS: Allow all origins (development mode)
        - Logging: INFO level with structured format
        - Routers: /api/compliance, /api/quotes, /api/equipment,
          /api/tickets, /api/search, /api/dashboard
        - Health: GET /health

    Usage:
        >>> app = create_app()
        >>> # uvicorn hvac_crm.api.main:app --reload
    """
    app = FastAPI(
        lifespan=lifespan,
        title="HVAC CRM API",
        version=__version__,
        description=(
            "HVAC service company backend: Polish compliance validation, quotes, "
            "equipment, service tickets, maintenance and semantic search."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
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
    app.add_exception_handler(HvacApiError, hvac_api_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    for router in (
        compliance_router,
        quotes_router,
        equipment_router,
        tickets_router,
        search_router,
        dashboard_router,
    ):
        app.include_router(router, prefix="/api")

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        description="Simple health check for monitoring and load balancers",
        tags=["health"],
    )
    def health_check() -> HealthCheckResponse:
        """
        Health check endpoint.

        Examples:
            >>> curl http://localhost:8000/health
            {"status": "ok", "version": "0.1.0", "timestamp": 1704976800.123, "redis": true}
        """
        return HealthCheckResponse(
            status="ok",
            version=__version__,
            timestamp=time.time(),
            redis=redis_health_check(),
        )

    logger.info("FastAPI application created successfully")
    logger.info(
        "Registered routers: /api/compliance, /api/quotes, /api/equipment, "
        "/api/tickets, /api/search, /api/dashboard"
    )

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn hvac_crm.api.main:app --reload
app = create_app()
