"""Listing, search and facet endpoints.

Each request replays the listing view once: the request's query string
is the navigable address, a FilterListing is mounted on it and the
pending pipeline run is flushed synchronously.
"""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from facetbrowse.api.schemas import (
    ErrorResponse,
    FacetCatalogResponse,
    FacetOptionSchema,
    FacetSectionSchema,
    ItemCardSchema,
    ListingResponse,
    PaginationSchema,
)
from facetbrowse.application.listing import FilterListing
from facetbrowse.application.presentation import ListingStatus
from facetbrowse.catalog.builder import FacetCatalogBuilder, Scope
from facetbrowse.catalog.models import Item
from facetbrowse.catalog.source import (
    CatalogSource,
    CatalogUnavailableError,
    get_catalog_source,
)
from facetbrowse.domain.facets import CheckboxFacet, Facet
from facetbrowse.domain.filters import FilterValues, RangeValue
from facetbrowse.domain.state import FilterState
from facetbrowse.infrastructure.address import MemoryAddress
from facetbrowse.infrastructure.config import settings
from facetbrowse.infrastructure.scheduling import ManualScheduler

logger = structlog.get_logger()

router = APIRouter(tags=["Listing"])


# ============================================================================
# Dependencies
# ============================================================================


def get_source() -> CatalogSource:
    """Get the catalog source."""
    return get_catalog_source(
        seed=settings.catalog_seed,
        products_per_category=settings.products_per_category,
    )


def get_builder() -> FacetCatalogBuilder:
    """Get a facet catalog builder."""
    return FacetCatalogBuilder(price_step=settings.price_step)


# ============================================================================
# Converters
# ============================================================================


def item_to_card(item: Item) -> ItemCardSchema:
    """Convert an Item to the card schema."""
    return ItemCardSchema(
        id=item.id,
        product_id=item.product_id,
        name=item.name,
        slug=item.slug,
        brand=item.brand_name,
        category=item.category,
        subcategory=item.subcategory,
        color=item.color,
        storage=item.storage,
        our_price=item.our_price,
        mrp=item.mrp,
        discount_percent=item.discount_percent,
        average_rating=item.average_rating,
        in_stock=item.in_stock,
        image_url=item.image_url,
    )


def facet_to_schema(facet: Facet, state: FilterState | None = None) -> FacetSectionSchema:
    """Convert a facet section, with UI state when a filter state is given."""
    expanded = state.is_expanded(facet.id) if state else False
    if isinstance(facet, CheckboxFacet):
        return FacetSectionSchema(
            id=facet.id,
            title=facet.title,
            kind=facet.kind,
            expanded=expanded,
            options=[
                FacetOptionSchema(id=o.id, label=o.label, checked=o.checked)
                for o in facet.options
            ],
            visible_options=len(state.visible_options(facet.id)) if state else None,
            has_more=state.has_more(facet.id) if state else False,
        )
    return FacetSectionSchema(
        id=facet.id,
        title=facet.title,
        kind=facet.kind,
        expanded=expanded,
        min=facet.min,
        max=facet.max,
        current_min=facet.current_min,
        current_max=facet.current_max,
        step=facet.step,
    )


def filters_to_json(values: FilterValues) -> dict[str, Any]:
    """Convert filter values to plain JSON types."""
    return {
        key: {"min": value.min, "max": value.max} if isinstance(value, RangeValue) else value
        for key, value in values.items()
    }


def listing_to_response(listing: FilterListing, address: MemoryAddress) -> ListingResponse:
    """Convert a mounted, flushed listing to the response schema.

    Raises:
        HTTPException: If the catalog source failed.
    """
    if listing.status == ListingStatus.ERROR or listing.result is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error_code": "CATALOG_UNAVAILABLE",
                "message": "The catalog could not be loaded",
            },
        )

    result = listing.result
    state = listing.state
    return ListingResponse(
        status=result.status,
        header=result.header,
        items=[item_to_card(item) for item in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_more=result.has_more,
        pagination=PaginationSchema(
            pages=result.controls.pages,
            prev_disabled=result.controls.prev_disabled,
            next_disabled=result.controls.next_disabled,
        ),
        sort=state.sort,
        query=listing.query,
        filters=filters_to_json(listing.filter_values),
        query_string=address.query_string,
        active_count=listing.active_count,
        facets=[facet_to_schema(f, state) for f in state.facets],
    )


def render_listing(
    request: Request,
    source: CatalogSource,
    builder: FacetCatalogBuilder,
    category: str | None = None,
    query: str | None = None,
) -> ListingResponse:
    """Mount a listing on the request's query string and render it."""
    address = MemoryAddress(request.url.query, path=request.url.path)
    listing = FilterListing(
        source,
        address,
        ManualScheduler(),
        builder=builder,
        page_size=settings.page_size,
        debounce_seconds=settings.debounce_seconds,
        visible_options=settings.visible_options,
        expanded_sections=settings.expanded_sections,
    )
    listing.mount(category, query=query)
    listing.flush()
    try:
        return listing_to_response(listing, address)
    finally:
        listing.unmount()


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/categories/{category}/products",
    response_model=ListingResponse,
    responses={503: {"model": ErrorResponse}},
    summary="List a category",
    description=(
        "Filter, sort and paginate the products of a category. Filters use "
        "the address schema: minPrice/maxPrice, repeated facet keys, "
        "inStock=true, sort, page and subcategory."
    ),
)
async def list_category(
    category: str,
    request: Request,
    source: Annotated[CatalogSource, Depends(get_source)],
    builder: Annotated[FacetCatalogBuilder, Depends(get_builder)],
) -> ListingResponse:
    """List one page of a category.

    Args:
        category: Category slug.
        request: Incoming request; its query string is the address.
        source: Catalog source.
        builder: Facet catalog builder.

    Returns:
        Listing page with facets.
    """
    return render_listing(request, source, builder, category=category)


@router.get(
    "/search/products",
    response_model=ListingResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Search products",
    description="Free-text search over the whole catalog, with facet filters.",
)
async def search_products(
    request: Request,
    source: Annotated[CatalogSource, Depends(get_source)],
    builder: Annotated[FacetCatalogBuilder, Depends(get_builder)],
    q: Annotated[str, Query(min_length=1, description="Search query")],
) -> ListingResponse:
    """List one page of search results.

    Args:
        request: Incoming request; its query string is the address.
        source: Catalog source.
        builder: Facet catalog builder.
        q: Search query.

    Returns:
        Listing page with facets built from the matching items.
    """
    return render_listing(request, source, builder, query=q)


@router.get(
    "/categories/{category}/facets",
    response_model=FacetCatalogResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Get the facet catalog of a category",
)
async def get_facets(
    category: str,
    source: Annotated[CatalogSource, Depends(get_source)],
    builder: Annotated[FacetCatalogBuilder, Depends(get_builder)],
    subcategory: Annotated[str | None, Query()] = None,
) -> FacetCatalogResponse:
    """Build the facet catalog of a scope.

    Args:
        category: Category slug.
        source: Catalog source.
        builder: Facet catalog builder.
        subcategory: Optional subcategory slug.

    Returns:
        Facet sections in display order.

    Raises:
        HTTPException: If the catalog source failed.
    """
    scope = Scope.of(category, subcategory)
    try:
        items = source.items_for_category(category, scope.subcategory)
    except CatalogUnavailableError as e:
        logger.warning("Catalog unavailable", category=category, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error_code": "CATALOG_UNAVAILABLE",
                "message": e.message,
            },
        ) from e

    return FacetCatalogResponse(
        category=scope.category,
        subcategory=scope.subcategory,
        facets=[facet_to_schema(f) for f in builder.build(items, scope)],
    )
