"""Canonical filter values and sort options.

FilterValues is the serializable record of what the user has chosen:
facet id -> selected option ids, a boolean flag, or a price range.
UI state (expanded sections, visible option counts) is never part of it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Self

import structlog

from facetbrowse.domain.base import ValueObject
from facetbrowse.domain.facets import CheckboxFacet, Facet, Number, RangeFacet

logger = structlog.get_logger()

# Facet identifiers with fixed meaning
PRICE_FACET = "price"
CATEGORY_FACET = "category"
RATING_FACET = "rating"
COLOR_FACET = "color"
STORAGE_FACET = "storage"
BRAND_FACET = "brand"

# Key of the global stock flag inside FilterValues
IN_STOCK_FLAG = "inStock"


@dataclass(frozen=True)
class RangeValue(ValueObject):
    """Selected numeric range, inclusive on both ends."""

    min: Number
    max: Number

    def contains(self, value: Number) -> bool:
        """Check if value lies within the range (inclusive)."""
        return self.min <= value <= self.max


FilterValue = list[str] | bool | RangeValue
FilterValues = dict[str, FilterValue]


def make_filter_values(
    selections: Mapping[str, Iterable[str]] | None = None,
    price: RangeValue | None = None,
    in_stock: bool = False,
) -> FilterValues:
    """Build a canonical FilterValues map.

    Empty selections and a false stock flag are omitted, never stored.

    Args:
        selections: Facet id -> selected option ids.
        price: Narrowed price range, if any.
        in_stock: Whether out-of-stock items are excluded.

    Returns:
        Canonical filter values.
    """
    values: FilterValues = {}
    if price is not None:
        values[PRICE_FACET] = price
    for facet_id, option_ids in (selections or {}).items():
        selected = list(option_ids)
        if selected:
            values[facet_id] = selected
    if in_stock:
        values[IN_STOCK_FLAG] = True
    return values


def filter_values_from_facets(
    facets: Iterable[Facet],
    exclude_out_of_stock: bool = False,
) -> FilterValues:
    """Derive the canonical filter values from facet selection state.

    Args:
        facets: Facets with their current selections.
        exclude_out_of_stock: Global stock flag.

    Returns:
        Canonical filter values.
    """
    price: RangeValue | None = None
    selections: dict[str, list[str]] = {}
    for facet in facets:
        if isinstance(facet, RangeFacet):
            if facet.id == PRICE_FACET and facet.is_narrowed:
                price = RangeValue(min=facet.current_min, max=facet.current_max)
        elif isinstance(facet, CheckboxFacet):
            selections[facet.id] = facet.selected_ids
    return make_filter_values(selections, price=price, in_stock=exclude_out_of_stock)


# ============================================================================
# Sort Options
# ============================================================================


class SortOption(str, Enum):
    """Listing sort orders."""

    FEATURED = "featured"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING = "rating"
    NEWEST = "newest"

    @classmethod
    def parse(cls, value: str | None) -> Self:
        """Parse a sort value from the address.

        Accepts the canonical values and the storefront's legacy aliases.
        Unknown values fall back to FEATURED.

        Args:
            value: Raw sort value.

        Returns:
            Parsed sort option.
        """
        if not value:
            return cls.FEATURED
        key = value.strip().lower()
        try:
            return cls(key)
        except ValueError:
            pass
        if key in _SORT_ALIASES:
            return cls(_SORT_ALIASES[key])
        logger.warning("Unknown sort option, using featured", sort=value)
        return cls.FEATURED


# Aliases used by older storefront links
_SORT_ALIASES: dict[str, str] = {
    "relevance": "featured",
    "price_asc": "price-asc",
    "price_desc": "price-desc",
    "rating_desc": "rating",
}
