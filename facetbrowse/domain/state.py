"""Filter state and its reducer.

FilterState is an immutable snapshot of the filter panel: facet
selections, UI state (expanded sections, "View more" toggles), the
global stock flag, the sort order and the current page. All mutations
go through reduce(state, event), which is pure.

State diagram of a single checkbox option:
    unchecked ── OptionToggled ──► checked
        ▲                            │
        └──── OptionToggled ─────────┤
        └──── FiltersCleared ────────┘
"""

import math
from dataclasses import dataclass, field, replace
from typing import Self

from facetbrowse.domain.base import FilterEvent
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
from facetbrowse.domain.exceptions import FacetKindMismatchError, UnknownFacetError
from facetbrowse.domain.facets import (
    CheckboxFacet,
    CheckboxOption,
    Facet,
    FacetKind,
    Number,
    RangeFacet,
)
from facetbrowse.domain.filters import (
    IN_STOCK_FLAG,
    PRICE_FACET,
    FilterValues,
    RangeValue,
    SortOption,
    filter_values_from_facets,
)

DEFAULT_VISIBLE_OPTIONS = 5
DEFAULT_EXPANDED_SECTIONS = 4


@dataclass(frozen=True)
class FilterState:
    """Immutable filter panel state.

    Attributes:
        facets: Facet sections in display order.
        expanded: Ids of sections whose option list is shown.
        show_all: Ids of sections switched to "View less" (all options shown).
        exclude_out_of_stock: Global stock flag.
        sort: Current sort order.
        page: Current page (1-based).
        visible_limit: Options shown per section before "View more".
        default_expanded: Sections expanded by default (restored on clear).
    """

    facets: tuple[Facet, ...] = ()
    expanded: frozenset[str] = frozenset()
    show_all: frozenset[str] = frozenset()
    exclude_out_of_stock: bool = False
    sort: SortOption = SortOption.FEATURED
    page: int = 1
    visible_limit: int = DEFAULT_VISIBLE_OPTIONS
    default_expanded: frozenset[str] = field(default=frozenset(), compare=False)

    @classmethod
    def initial(
        cls,
        facets: list[Facet] | tuple[Facet, ...],
        expanded_sections: int = DEFAULT_EXPANDED_SECTIONS,
        visible_limit: int = DEFAULT_VISIBLE_OPTIONS,
        sort: SortOption = SortOption.FEATURED,
    ) -> Self:
        """Create a fresh state for a facet catalog.

        Nothing is selected, ranges span their full bounds and the
        leading sections are expanded.

        Args:
            facets: Facet sections from the catalog builder.
            expanded_sections: Number of leading sections to expand.
            visible_limit: Options shown per section before "View more".
            sort: Initial sort order.

        Returns:
            Fresh filter state.
        """
        default_expanded = frozenset(f.id for f in list(facets)[:expanded_sections])
        return cls(
            facets=tuple(f.cleared() for f in facets),
            expanded=default_expanded,
            visible_limit=visible_limit,
            sort=sort,
            default_expanded=default_expanded,
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def facet_ids(self) -> list[str]:
        """Get facet ids in display order."""
        return [f.id for f in self.facets]

    def facet(self, facet_id: str) -> Facet:
        """Get a facet by id.

        Raises:
            UnknownFacetError: If no facet has the id.
        """
        for f in self.facets:
            if f.id == facet_id:
                return f
        raise UnknownFacetError(facet_id, self.facet_ids)

    @property
    def filter_values(self) -> FilterValues:
        """Get the canonical filter values."""
        return filter_values_from_facets(self.facets, self.exclude_out_of_stock)

    @property
    def active_count(self) -> int:
        """Count applied filters for the badge.

        Each checked option counts once, a narrowed range counts once and
        the stock flag counts once.
        """
        count = 0
        for f in self.facets:
            if isinstance(f, CheckboxFacet):
                count += f.checked_count
            elif f.is_narrowed:
                count += 1
        if self.exclude_out_of_stock:
            count += 1
        return count

    def is_expanded(self, facet_id: str) -> bool:
        """Check if a section's option list is shown."""
        return facet_id in self.expanded

    def visible_options(self, facet_id: str) -> tuple[CheckboxOption, ...]:
        """Get the options currently shown for a checkbox section."""
        f = self._checkbox(facet_id)
        if facet_id in self.show_all:
            return f.options
        return f.options[: self.visible_limit]

    def has_more(self, facet_id: str) -> bool:
        """Check if a section has more options than the collapsed limit."""
        return len(self._checkbox(facet_id).options) > self.visible_limit

    def _checkbox(self, facet_id: str) -> CheckboxFacet:
        f = self.facet(facet_id)
        if not isinstance(f, CheckboxFacet):
            raise FacetKindMismatchError(facet_id, FacetKind.CHECKBOX.value, f.kind.value)
        return f

    def _range(self, facet_id: str) -> RangeFacet:
        f = self.facet(facet_id)
        if not isinstance(f, RangeFacet):
            raise FacetKindMismatchError(facet_id, FacetKind.RANGE.value, f.kind.value)
        return f

    def _with_facet(self, updated: Facet) -> Self:
        return replace(
            self,
            facets=tuple(updated if f.id == updated.id else f for f in self.facets),
        )


# ============================================================================
# Reducer
# ============================================================================


def reduce(state: FilterState, event: FilterEvent) -> FilterState:
    """Apply one filter event to a state.

    Filter-changing events always send the listing back to page 1.

    Args:
        state: Current state.
        event: Event to apply.

    Returns:
        New state.

    Raises:
        UnknownFacetError: If the event names a facet not in the state.
        FacetKindMismatchError: If the event targets the wrong facet kind.
    """
    new_state = _apply(state, event)
    if event.changes_filters and new_state.page != 1:
        new_state = replace(new_state, page=1)
    return new_state


def _apply(state: FilterState, event: FilterEvent) -> FilterState:
    if isinstance(event, SectionExpandedToggled):
        state.facet(event.facet_id)
        return replace(state, expanded=state.expanded ^ {event.facet_id})

    if isinstance(event, VisibleCountToggled):
        state._checkbox(event.facet_id)
        return replace(state, show_all=state.show_all ^ {event.facet_id})

    if isinstance(event, OptionToggled):
        return state._with_facet(state._checkbox(event.facet_id).toggled(event.option_id))

    if isinstance(event, RangeSet):
        facet = state._range(event.facet_id)
        return state._with_facet(facet.with_bounds(event.min, event.max))

    if isinstance(event, RangeInputChanged):
        facet = state._range(event.facet_id)
        if event.bound == "min":
            low = parse_bound(event.raw, facet.min)
            return state._with_facet(facet.with_bounds(low, facet.current_max))
        high = parse_bound(event.raw, facet.max)
        return state._with_facet(facet.with_bounds(facet.current_min, high))

    if isinstance(event, OutOfStockToggled):
        return replace(state, exclude_out_of_stock=not state.exclude_out_of_stock)

    if isinstance(event, FiltersCleared):
        return replace(
            state,
            facets=tuple(f.cleared() for f in state.facets),
            expanded=state.default_expanded,
            show_all=frozenset(),
            exclude_out_of_stock=False,
        )

    if isinstance(event, FiltersRestored):
        return restore(state, event.values)

    if isinstance(event, SortChanged):
        return replace(state, sort=event.sort, page=1)

    if isinstance(event, PageChanged):
        return replace(state, page=max(1, event.page))

    raise TypeError(f"Unsupported filter event: {type(event).__name__}")


def restore(state: FilterState, values: FilterValues) -> FilterState:
    """Replace every selection with the given filter values.

    Facets absent from values are reset; ids not present in a facet's
    option list are dropped.

    Args:
        state: Current state.
        values: Canonical filter values.

    Returns:
        State whose filter_values match values (restricted to known facets).
    """
    facets: list[Facet] = []
    for f in state.facets:
        selected = values.get(f.id)
        if isinstance(f, RangeFacet):
            if f.id == PRICE_FACET and isinstance(selected, RangeValue):
                facets.append(f.cleared().with_bounds(selected.min, selected.max))
            else:
                facets.append(f.cleared())
        elif isinstance(selected, list):
            facets.append(f.with_selection(set(selected)))
        else:
            facets.append(f.cleared())
    return replace(
        state,
        facets=tuple(facets),
        exclude_out_of_stock=values.get(IN_STOCK_FLAG) is True,
    )


def rebuild(state: FilterState, facets: list[Facet] | tuple[Facet, ...]) -> FilterState:
    """Swap in a recomputed facet catalog for the same scope.

    Selections whose options survive the rebuild are kept; the price
    range is clamped into the new bounds and reset when the old lower
    bound no longer fits. UI state of surviving sections is preserved.

    Args:
        state: Current state.
        facets: Facet catalog rebuilt from a refreshed snapshot.

    Returns:
        State over the new facets.
    """
    merged: list[Facet] = []
    for f in facets:
        f = f.cleared()
        try:
            previous = state.facet(f.id)
        except UnknownFacetError:
            merged.append(f)
            continue
        if isinstance(f, CheckboxFacet) and isinstance(previous, CheckboxFacet):
            merged.append(f.with_selection(set(previous.selected_ids)))
        elif isinstance(f, RangeFacet) and isinstance(previous, RangeFacet):
            if previous.is_narrowed and previous.current_min <= f.max:
                merged.append(f.with_bounds(previous.current_min, previous.current_max))
            else:
                merged.append(f)
        else:
            merged.append(f)
    ids = {f.id for f in merged}
    return replace(
        state,
        facets=tuple(merged),
        expanded=frozenset(i for i in state.expanded if i in ids),
        show_all=frozenset(i for i in state.show_all if i in ids),
        default_expanded=frozenset(i for i in state.default_expanded if i in ids),
    )


def parse_bound(raw: str | None, fallback: Number) -> Number:
    """Parse a typed range bound, falling back on malformed input.

    Args:
        raw: Text typed by the user (or read from the address).
        fallback: Value used when raw is missing or not a finite number.

    Returns:
        Parsed number (int when integral) or fallback.
    """
    if raw is None:
        return fallback
    text = str(raw).strip().replace(",", "")
    if not text:
        return fallback
    try:
        value = float(text)
    except ValueError:
        return fallback
    if not math.isfinite(value):
        return fallback
    return int(value) if value.is_integer() else value
