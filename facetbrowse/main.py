"""facetbrowse main application module.

Initializes the FastAPI application and configures middleware,
routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from facetbrowse.api.health import router as health_router
from facetbrowse.api.listing import router as listing_router
from facetbrowse.api.middleware import setup_middleware
from facetbrowse.catalog.source import get_catalog_source
from facetbrowse.domain.exceptions import (
    DomainError,
    FacetKindMismatchError,
    ListingNotMountedError,
    UnknownFacetError,
)
from facetbrowse.infrastructure.config import settings
from facetbrowse.infrastructure.log_config import configure_logging

configure_logging(settings.log_level, json=not settings.debug)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting facetbrowse",
        version=settings.api_version,
        debug=settings.debug,
    )

    source = get_catalog_source(
        seed=settings.catalog_seed,
        products_per_category=settings.products_per_category,
    )
    logger.info("Catalog snapshot loaded", item_count=len(source))

    yield

    logger.info("Shutting down facetbrowse")


app = FastAPI(
    title="facetbrowse",
    description="Faceted filtering and listing engine for catalog browsing",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_middleware(app)

app.include_router(health_router, tags=["Health"])
app.include_router(listing_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================

# Domain error -> (status code, error code)
_DOMAIN_ERROR_CODES: dict[type[DomainError], tuple[int, str]] = {
    UnknownFacetError: (400, "UNKNOWN_FACET"),
    FacetKindMismatchError: (400, "FACET_KIND_MISMATCH"),
    ListingNotMountedError: (409, "LISTING_NOT_MOUNTED"),
}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to client errors."""
    request_id = getattr(request.state, "request_id", None)
    status_code, error_code = next(
        (codes for cls, codes in _DOMAIN_ERROR_CODES.items() if isinstance(exc, cls)),
        (400, "DOMAIN_ERROR"),
    )
    logger.warning("Domain error", error_code=error_code, error=exc.message)

    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=500,
        content={
            "error_code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": [],
            "request_id": request_id,
        },
    )
