"""Filter events.

Each event is one discrete user interaction with the filter panel or
listing controls. Events carry no behaviour; the reducer in
facetbrowse.domain.state applies them.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Literal

from facetbrowse.domain.base import FilterEvent
from facetbrowse.domain.facets import Number
from facetbrowse.domain.filters import FilterValues, SortOption


# ============================================================================
# UI-only Events
# ============================================================================


@dataclass(frozen=True)
class SectionExpandedToggled(FilterEvent):
    """Flip visibility of a facet's option list."""

    event_type: ClassVar[str] = "filter.section_toggled"
    changes_filters: ClassVar[bool] = False
    reruns_listing: ClassVar[bool] = False

    facet_id: str = ""


@dataclass(frozen=True)
class VisibleCountToggled(FilterEvent):
    """Switch a facet between its first few options and all options."""

    event_type: ClassVar[str] = "filter.visible_count_toggled"
    changes_filters: ClassVar[bool] = False
    reruns_listing: ClassVar[bool] = False

    facet_id: str = ""


# ============================================================================
# Selection Events
# ============================================================================


@dataclass(frozen=True)
class OptionToggled(FilterEvent):
    """Flip one checkbox option."""

    event_type: ClassVar[str] = "filter.option_toggled"

    facet_id: str = ""
    option_id: str = ""


@dataclass(frozen=True)
class RangeSet(FilterEvent):
    """Set both bounds of a range facet (slider drag)."""

    event_type: ClassVar[str] = "filter.range_set"

    facet_id: str = ""
    min: Number = 0
    max: Number = 0


@dataclass(frozen=True)
class RangeInputChanged(FilterEvent):
    """Type a raw value into one bound's text input.

    Empty or unparseable text falls back to the respective facet bound.
    """

    event_type: ClassVar[str] = "filter.range_input_changed"

    facet_id: str = ""
    bound: Literal["min", "max"] = "min"
    raw: str = ""


@dataclass(frozen=True)
class OutOfStockToggled(FilterEvent):
    """Flip the global exclude-out-of-stock flag."""

    event_type: ClassVar[str] = "filter.out_of_stock_toggled"


@dataclass(frozen=True)
class FiltersCleared(FilterEvent):
    """Reset every selection and the UI defaults."""

    event_type: ClassVar[str] = "filter.cleared"


@dataclass(frozen=True)
class FiltersRestored(FilterEvent):
    """Replace all selections with values read from the address."""

    event_type: ClassVar[str] = "filter.restored"

    values: FilterValues = field(default_factory=dict)


# ============================================================================
# Listing Events
# ============================================================================


@dataclass(frozen=True)
class SortChanged(FilterEvent):
    """Choose a different sort order."""

    event_type: ClassVar[str] = "listing.sort_changed"
    changes_filters: ClassVar[bool] = False

    sort: SortOption = SortOption.FEATURED


@dataclass(frozen=True)
class PageChanged(FilterEvent):
    """Navigate to another result page (1-based)."""

    event_type: ClassVar[str] = "listing.page_changed"
    changes_filters: ClassVar[bool] = False

    page: int = 1
