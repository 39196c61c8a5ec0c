"""API schemas for facetbrowse.

Pydantic models for response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from facetbrowse.application.presentation import ListingStatus
from facetbrowse.domain.facets import FacetKind
from facetbrowse.domain.filters import SortOption


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Any = Field(default_factory=list, description="Additional error details")
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PaginatedResponse(BaseModel):
    """Base paginated response."""

    total: int = Field(..., description="Total number of matching items")
    page: int = Field(..., description="Current page number (1-based)")
    page_size: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Number of pages")
    has_more: bool = Field(..., description="Whether there are more pages")


# ============================================================================
# Facet Schemas
# ============================================================================


class FacetOptionSchema(BaseModel):
    """One checkbox option."""

    id: str = Field(..., description="Normalized option id, as used in the address")
    label: str
    checked: bool = False


class FacetSectionSchema(BaseModel):
    """One facet section of the filter panel.

    Checkbox sections carry options; range sections carry bounds.
    """

    id: str
    title: str
    kind: FacetKind
    expanded: bool = False
    options: list[FacetOptionSchema] | None = None
    visible_options: int | None = Field(
        default=None, description="Options shown before 'View more'"
    )
    has_more: bool = False
    min: float | None = None
    max: float | None = None
    current_min: float | None = None
    current_max: float | None = None
    step: float | None = None


class FacetCatalogResponse(BaseModel):
    """Facet catalog of a scope."""

    category: str | None = None
    subcategory: str | None = None
    facets: list[FacetSectionSchema] = Field(default_factory=list)


# ============================================================================
# Listing Schemas
# ============================================================================


class ItemCardSchema(BaseModel):
    """What the card renderer receives for one item."""

    id: str
    product_id: str
    name: str
    slug: str
    brand: str
    category: str
    subcategory: str
    color: str
    storage: str
    our_price: float
    mrp: float
    discount_percent: int
    average_rating: float
    in_stock: bool
    image_url: str | None = None


class PaginationSchema(BaseModel):
    """Pagination bar; null page entries are ellipses."""

    pages: list[int | None] = Field(default_factory=list)
    prev_disabled: bool = True
    next_disabled: bool = True


class ListingResponse(PaginatedResponse):
    """One page of a category or search listing."""

    status: ListingStatus
    header: str
    items: list[ItemCardSchema] = Field(default_factory=list)
    pagination: PaginationSchema
    sort: SortOption
    query: str | None = None
    filters: dict[str, Any] = Field(
        default_factory=dict, description="Canonical filter values"
    )
    query_string: str = Field(
        default="", description="Canonical address query string"
    )
    active_count: int = 0
    facets: list[FacetSectionSchema] = Field(default_factory=list)
