"""Address synchronizer.

Maps canonical filter values to and from the query parameters of the
page's navigable address. The address itself is reached through an
injected AddressPort, so nothing here depends on a navigation runtime.

Query-parameter schema:
    minPrice, maxPrice       price range bounds (single)
    <facet id>               checkbox selections (repeated key)
    inStock                  stock-exclusion flag, "true" only
    sort                     sort order (single)
    page                     1-based page, omitted on page 1
    subcategory, q           scope inputs, rewritten only on scope change
"""

from typing import Iterable, Protocol

import structlog
from starlette.datastructures import QueryParams

from facetbrowse.catalog.labels import normalize_value
from facetbrowse.domain.facets import CheckboxFacet, Facet, Number, RangeFacet
from facetbrowse.domain.filters import (
    BRAND_FACET,
    CATEGORY_FACET,
    COLOR_FACET,
    IN_STOCK_FLAG,
    PRICE_FACET,
    RATING_FACET,
    STORAGE_FACET,
    FilterValues,
    RangeValue,
    SortOption,
)
from facetbrowse.domain.state import parse_bound

logger = structlog.get_logger()

MIN_PRICE_PARAM = "minPrice"
MAX_PRICE_PARAM = "maxPrice"
IN_STOCK_PARAM = IN_STOCK_FLAG
SORT_PARAM = "sort"
PAGE_PARAM = "page"
SUBCATEGORY_PARAM = "subcategory"
QUERY_PARAM = "q"

# Filter keys that are always cleared before a write, whatever the scope
STATIC_FILTER_PARAMS = frozenset(
    {
        MIN_PRICE_PARAM,
        MAX_PRICE_PARAM,
        IN_STOCK_PARAM,
        PAGE_PARAM,
        CATEGORY_FACET,
        RATING_FACET,
        COLOR_FACET,
        STORAGE_FACET,
        BRAND_FACET,
    }
)

SCOPE_PARAMS = frozenset({SUBCATEGORY_PARAM, QUERY_PARAM, SORT_PARAM})


class AddressPort(Protocol):
    """Interface of the navigable address (query-string half)."""

    def read(self) -> QueryParams:
        """Get the current query parameters."""
        ...

    def replace(self, params: QueryParams) -> None:
        """Replace the current history entry's query parameters."""
        ...


# ============================================================================
# Serialization
# ============================================================================


def format_number(value: Number) -> str:
    """Render a bound without a trailing ".0"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def serialize(values: FilterValues) -> QueryParams:
    """Turn filter values into query parameters.

    Args:
        values: Canonical filter values.

    Returns:
        Parameters in the order the values were given.
    """
    items: list[tuple[str, str]] = []
    for key, value in values.items():
        if isinstance(value, RangeValue):
            if key == PRICE_FACET:
                items.append((MIN_PRICE_PARAM, format_number(value.min)))
                items.append((MAX_PRICE_PARAM, format_number(value.max)))
        elif isinstance(value, bool):
            if value and key == IN_STOCK_FLAG:
                items.append((IN_STOCK_PARAM, "true"))
        else:
            items.extend((key, option_id) for option_id in value)
    return QueryParams(items)


def deserialize(params: QueryParams, facets: Iterable[Facet]) -> FilterValues:
    """Read filter values out of query parameters.

    Only facets in the current catalog are read. Checkbox values are
    compared in normalized form and kept when the option exists. A
    missing or malformed price bound falls back to the facet bound.

    Args:
        params: Query parameters.
        facets: Current facet catalog.

    Returns:
        Canonical filter values.
    """
    values: FilterValues = {}
    known = set(STATIC_FILTER_PARAMS | SCOPE_PARAMS)
    for facet in facets:
        known.add(facet.id)
        if isinstance(facet, RangeFacet):
            if facet.id == PRICE_FACET:
                price = _read_price(params, facet)
                if price is not None:
                    values[PRICE_FACET] = price
        elif isinstance(facet, CheckboxFacet):
            wanted = {normalize_value(v) for v in params.getlist(facet.id)}
            selected = [o.id for o in facet.options if o.id in wanted]
            if selected:
                values[facet.id] = selected

    if normalize_value(params.get(IN_STOCK_PARAM, "")) == "true":
        values[IN_STOCK_FLAG] = True

    unknown = sorted({key for key in params.keys() if key not in known})
    if unknown:
        logger.warning("Unknown address keys ignored", keys=unknown)
    return values


def _read_price(params: QueryParams, facet: RangeFacet) -> RangeValue | None:
    raw_min = params.get(MIN_PRICE_PARAM)
    raw_max = params.get(MAX_PRICE_PARAM)
    if raw_min is None and raw_max is None:
        return None
    for raw in (raw_min, raw_max):
        if raw is not None and parse_bound(raw, None) is None:
            logger.warning("Unparseable price bound, using facet bound", raw=raw)
    narrowed = facet.with_bounds(
        parse_bound(raw_min, facet.min),
        parse_bound(raw_max, facet.max),
    )
    if not narrowed.is_narrowed:
        return None
    return RangeValue(min=narrowed.current_min, max=narrowed.current_max)


def read_sort(params: QueryParams) -> SortOption:
    """Read the sort order (FEATURED when absent or unknown)."""
    return SortOption.parse(params.get(SORT_PARAM))


def read_page(params: QueryParams) -> int:
    """Read the 1-based page number (1 when absent or malformed)."""
    raw = params.get(PAGE_PARAM)
    if raw is None:
        return 1
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning("Unparseable page number, using page 1", raw=raw)
        return 1


def filter_params(facets: Iterable[Facet]) -> frozenset[str]:
    """Get every query key owned by filters for a facet catalog."""
    return STATIC_FILTER_PARAMS | {f.id for f in facets if f.id != PRICE_FACET}


# ============================================================================
# Synchronizer
# ============================================================================


class AddressSynchronizer:
    """Writes filter, sort and page changes through to the address.

    Writes are immediate and synchronous; each one replaces the current
    history entry rather than pushing a new one. Filter writes leave
    subcategory, q and tracking parameters untouched; only scope
    changes rewrite subcategory and q.
    """

    def __init__(self, port: AddressPort) -> None:
        """Initialize synchronizer.

        Args:
            port: Navigable address.
        """
        self.port = port

    def read(self) -> QueryParams:
        """Get the current query parameters."""
        return self.port.read()

    def has_listing_params(self, facets: Iterable[Facet]) -> bool:
        """Check if the address carries any filter, sort or page key."""
        keys = filter_params(facets) | {SORT_PARAM}
        return any(key in keys for key in self.port.read().keys())

    def restore(self, facets: list[Facet]) -> tuple[FilterValues, SortOption, int]:
        """Read filter values, sort and page from the address.

        Args:
            facets: Current facet catalog.

        Returns:
            Filter values, sort order and page.
        """
        params = self.port.read()
        return deserialize(params, facets), read_sort(params), read_page(params)

    def write(self, values: FilterValues, facets: Iterable[Facet]) -> QueryParams:
        """Write filter values, resetting the page.

        Every filter key (and page) is deleted first, then the new
        values are appended, so no stale key survives.

        Args:
            values: Canonical filter values.
            facets: Current facet catalog.

        Returns:
            Parameters now in the address.
        """
        return self._rewrite(filter_params(facets), serialize(values).multi_items())

    def write_sort(self, sort: SortOption) -> QueryParams:
        """Write the sort order, resetting the page."""
        return self._rewrite({SORT_PARAM, PAGE_PARAM}, [(SORT_PARAM, sort.value)])

    def write_page(self, page: int) -> QueryParams:
        """Write the page number (omitted for page 1)."""
        appended = [(PAGE_PARAM, str(page))] if page > 1 else []
        return self._rewrite({PAGE_PARAM}, appended)

    def write_scope(
        self,
        subcategory: str | None,
        query: str | None,
        stale_facets: Iterable[Facet],
    ) -> QueryParams:
        """Write a new subcategory and query, dropping the old scope's filters.

        Sort survives; every filter key of stale_facets and the page are
        removed.

        Args:
            subcategory: New subcategory slug.
            query: New free-text query.
            stale_facets: Facet catalogs whose keys must not survive.

        Returns:
            Parameters now in the address.
        """
        appended = [
            (key, value)
            for key, value in ((SUBCATEGORY_PARAM, subcategory), (QUERY_PARAM, query))
            if value
        ]
        removed = filter_params(stale_facets) | {SUBCATEGORY_PARAM, QUERY_PARAM}
        return self._rewrite(removed, appended)

    def _rewrite(
        self, removed: Iterable[str], appended: list[tuple[str, str]]
    ) -> QueryParams:
        removed = set(removed)
        kept = [(k, v) for k, v in self.port.read().multi_items() if k not in removed]
        params = QueryParams(kept + list(appended))
        self.port.replace(params)
        logger.debug("Address written", query=str(params))
        return params
