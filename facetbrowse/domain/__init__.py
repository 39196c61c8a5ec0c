"""Domain layer for facetbrowse.

Facet variants, canonical filter values, filter events and the pure
filter-state reducer.
"""

from facetbrowse.domain.events import (
    FiltersCleared,
    FiltersRestored,
    OptionToggled,
    OutOfStockToggled,
    PageChanged,
    RangeInputChanged,
    RangeSet,
    SectionExpandedToggled,
    SortChanged,
    VisibleCountToggled,
)
from facetbrowse.domain.exceptions import (
    DomainError,
    FacetKindMismatchError,
    ListingNotMountedError,
    UnknownFacetError,
)
from facetbrowse.domain.facets import (
    CheckboxFacet,
    CheckboxOption,
    Facet,
    FacetKind,
    RangeFacet,
)
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
    filter_values_from_facets,
    make_filter_values,
)
from facetbrowse.domain.state import FilterState, rebuild, reduce, restore

__all__ = [
    # Facets
    "CheckboxFacet",
    "CheckboxOption",
    "Facet",
    "FacetKind",
    "RangeFacet",
    # Filter values
    "BRAND_FACET",
    "CATEGORY_FACET",
    "COLOR_FACET",
    "IN_STOCK_FLAG",
    "PRICE_FACET",
    "RATING_FACET",
    "STORAGE_FACET",
    "FilterValues",
    "RangeValue",
    "SortOption",
    "filter_values_from_facets",
    "make_filter_values",
    # Events
    "FiltersCleared",
    "FiltersRestored",
    "OptionToggled",
    "OutOfStockToggled",
    "PageChanged",
    "RangeInputChanged",
    "RangeSet",
    "SectionExpandedToggled",
    "SortChanged",
    "VisibleCountToggled",
    # State
    "FilterState",
    "rebuild",
    "reduce",
    "restore",
    # Exceptions
    "DomainError",
    "FacetKindMismatchError",
    "ListingNotMountedError",
    "UnknownFacetError",
]
