"""Health check endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from facetbrowse.catalog.source import get_catalog_source
from facetbrowse.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="facetbrowse",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check() -> dict[str, str | int]:
    """Check if the catalog snapshot is loaded.

    Returns:
        Readiness status and snapshot size.
    """
    source = get_catalog_source(
        seed=settings.catalog_seed,
        products_per_category=settings.products_per_category,
    )
    return {"status": "ready", "items": len(source)}
