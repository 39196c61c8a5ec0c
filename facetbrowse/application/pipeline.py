"""Filter/sort/paginate pipeline.

A pure transformation from (item snapshot, filter values, sort option,
free-text query) to an ordered, paged result set. Each stage narrows the
output of the previous one; an empty filter value is no constraint.
"""

import re
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from facetbrowse.catalog.builder import Scope, floor_rating, item_facet_value
from facetbrowse.catalog.labels import normalize_value
from facetbrowse.catalog.models import Item
from facetbrowse.domain.filters import (
    IN_STOCK_FLAG,
    PRICE_FACET,
    RATING_FACET,
    FilterValues,
    RangeValue,
    SortOption,
)

T = TypeVar("T")

# Characters kept in search tokens besides letters and digits
_UNSAFE_QUERY_CHARS = re.compile(r"[^\w\s+.\-]")


# ============================================================================
# Constraints
# ============================================================================


@dataclass(frozen=True)
class PriceConstraint:
    """Item price must lie within the range (inclusive)."""

    range: RangeValue


@dataclass(frozen=True)
class OptionConstraint:
    """Item's facet value must be one of the selected option ids."""

    facet_id: str
    option_ids: frozenset[str]


@dataclass(frozen=True)
class RatingConstraint:
    """Item's floored rating must reach the lowest selected threshold."""

    min_stars: int


@dataclass(frozen=True)
class StockConstraint:
    """Item must have at least one unit in stock."""


Constraint = PriceConstraint | OptionConstraint | RatingConstraint | StockConstraint


def compile_constraints(values: FilterValues) -> list[Constraint]:
    """Translate filter values into constraints in pipeline stage order.

    Order: price, checkbox facets, rating, stock. Values that carry no
    constraint (empty selections, unparseable rating thresholds) are
    skipped.

    Args:
        values: Canonical filter values.

    Returns:
        Ordered constraints.
    """
    constraints: list[Constraint] = []

    price = values.get(PRICE_FACET)
    if isinstance(price, RangeValue):
        constraints.append(PriceConstraint(price))

    for facet_id, selected in values.items():
        if facet_id in (PRICE_FACET, RATING_FACET, IN_STOCK_FLAG):
            continue
        if isinstance(selected, list) and selected:
            constraints.append(
                OptionConstraint(facet_id, frozenset(normalize_value(v) for v in selected))
            )

    ratings = values.get(RATING_FACET)
    if isinstance(ratings, list):
        thresholds = [int(r) for r in ratings if str(r).strip().isdigit()]
        if thresholds:
            constraints.append(RatingConstraint(min(thresholds)))

    if values.get(IN_STOCK_FLAG) is True:
        constraints.append(StockConstraint())

    return constraints


def satisfies(item: Item, constraint: Constraint) -> bool:
    """Check one item against one constraint.

    An item with no value for a constrained facet does not match.
    """
    if isinstance(constraint, PriceConstraint):
        return constraint.range.contains(item.our_price)
    if isinstance(constraint, OptionConstraint):
        value = item_facet_value(item, constraint.facet_id)
        return value is not None and normalize_value(value) in constraint.option_ids
    if isinstance(constraint, RatingConstraint):
        return floor_rating(item.average_rating) >= constraint.min_stars
    if isinstance(constraint, StockConstraint):
        return item.stock > 0
    raise TypeError(f"Unsupported constraint: {type(constraint).__name__}")


# ============================================================================
# Free-text Search
# ============================================================================


def tokenize_query(query: str | None) -> list[str]:
    """Split a search query into sanitized, lower-cased tokens."""
    if not query:
        return []
    cleaned = _UNSAFE_QUERY_CHARS.sub(" ", normalize_value(query))
    return [token for token in cleaned.split() if token]


def searchable_text(item: Item) -> str:
    """Concatenate the fields free-text search looks at."""
    fields = [
        item.name,
        item.category,
        item.subcategory,
        item.brand_name,
        item.description,
        *item.tags,
    ]
    return normalize_value(" ".join(f for f in fields if f))


def matches_query(item: Item, tokens: list[str]) -> bool:
    """Check that every token occurs somewhere in the item's searchable text."""
    if not tokens:
        return True
    text = searchable_text(item)
    return all(token in text for token in tokens)


# ============================================================================
# Sorting
# ============================================================================


def sort_items(items: list[Item], sort: SortOption) -> list[Item]:
    """Stable-sort items.

    FEATURED keeps the input order untouched.

    Args:
        items: Items to sort.
        sort: Sort option.

    Returns:
        New sorted list.
    """
    if sort == SortOption.PRICE_ASC:
        return sorted(items, key=lambda i: i.our_price)
    if sort == SortOption.PRICE_DESC:
        return sorted(items, key=lambda i: i.our_price, reverse=True)
    if sort == SortOption.RATING:
        return sorted(items, key=lambda i: i.average_rating, reverse=True)
    if sort == SortOption.NEWEST:
        return sorted(items, key=lambda i: i.created_at, reverse=True)
    return list(items)


# ============================================================================
# Pipeline
# ============================================================================


def filter_items(
    items: Iterable[Item],
    values: FilterValues,
    query: str | None = None,
    scope: Scope | None = None,
) -> list[Item]:
    """Run the narrowing stages of the pipeline.

    Args:
        items: Full item snapshot.
        values: Canonical filter values.
        query: Free-text query.
        scope: Category/subcategory scope.

    Returns:
        Matching items in input order.
    """
    result = (scope or Scope()).filter(items)

    tokens = tokenize_query(query)
    if tokens:
        result = [item for item in result if matches_query(item, tokens)]

    for constraint in compile_constraints(values):
        result = [item for item in result if satisfies(item, constraint)]

    return result


def run_pipeline(
    items: Iterable[Item],
    values: FilterValues,
    sort: SortOption = SortOption.FEATURED,
    query: str | None = None,
    scope: Scope | None = None,
) -> list[Item]:
    """Filter and sort an item snapshot.

    Args:
        items: Full item snapshot.
        values: Canonical filter values.
        sort: Sort option.
        query: Free-text query.
        scope: Category/subcategory scope.

    Returns:
        Ordered matching items.
    """
    return sort_items(filter_items(items, values, query=query, scope=scope), sort)


# ============================================================================
# Pagination
# ============================================================================


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = 24

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: Items on the current page.
        total: Total count across all pages.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    @property
    def is_empty(self) -> bool:
        """Check if nothing matched at all."""
        return self.total == 0


def paginate(items: list[T], pagination: PaginationParams) -> PaginatedResult[T]:
    """Slice one page out of an ordered result.

    Args:
        items: Ordered items.
        pagination: Page and page size.

    Returns:
        Page of items with totals.
    """
    page = max(1, pagination.page)
    start = (page - 1) * pagination.page_size
    return PaginatedResult(
        items=items[start : start + pagination.page_size],
        total=len(items),
        page=page,
        page_size=pagination.page_size,
    )
