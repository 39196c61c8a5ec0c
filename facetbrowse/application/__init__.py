"""Application layer for facetbrowse.

The filter/sort/paginate pipeline, the address synchronizer, the
debounced trigger, the listing presentation adapter and the composed
FilterListing controller.
"""

from facetbrowse.application.address import (
    AddressPort,
    AddressSynchronizer,
    deserialize,
    serialize,
)
from facetbrowse.application.debounce import Debouncer
from facetbrowse.application.listing import FilterListing
from facetbrowse.application.pipeline import (
    PaginatedResult,
    PaginationParams,
    filter_items,
    paginate,
    run_pipeline,
    sort_items,
)
from facetbrowse.application.presentation import (
    ListingPage,
    ListingStatus,
    PaginationControls,
    header_text,
    page_window,
    present,
)

__all__ = [
    # Pipeline
    "PaginatedResult",
    "PaginationParams",
    "filter_items",
    "paginate",
    "run_pipeline",
    "sort_items",
    # Address
    "AddressPort",
    "AddressSynchronizer",
    "deserialize",
    "serialize",
    # Debounce
    "Debouncer",
    # Presentation
    "ListingPage",
    "ListingStatus",
    "PaginationControls",
    "header_text",
    "page_window",
    "present",
    # Controller
    "FilterListing",
]
