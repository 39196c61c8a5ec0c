"""Tests for the filter state reducer."""

from dataclasses import replace

import pytest

from facetbrowse.domain import (
    CheckboxFacet,
    CheckboxOption,
    FacetKindMismatchError,
    FiltersCleared,
    FiltersRestored,
    FilterState,
    OptionToggled,
    OutOfStockToggled,
    PageChanged,
    RangeFacet,
    RangeSet,
    RangeValue,
    SectionExpandedToggled,
    SortChanged,
    SortOption,
    UnknownFacetError,
    VisibleCountToggled,
    rebuild,
    reduce,
)
from facetbrowse.domain.events import RangeInputChanged
from facetbrowse.domain.state import parse_bound


def _checkbox(facet_id: str, *option_ids: str) -> CheckboxFacet:
    return CheckboxFacet(
        id=facet_id,
        title=facet_id.title(),
        options=tuple(CheckboxOption(id=o, label=o.title()) for o in option_ids),
    )


@pytest.fixture
def facets() -> list:
    """Facet catalog with one range facet and four checkbox facets."""
    return [
        RangeFacet.full("price", "Price", max=1000),
        _checkbox("color", "black", "blue", "red"),
        _checkbox("brand", "a", "b", "c", "d", "e", "f", "g"),
        _checkbox("rating", "4", "3"),
        _checkbox("size", "m", "l"),
    ]


@pytest.fixture
def state(facets: list) -> FilterState:
    """Create a fresh filter state."""
    return FilterState.initial(facets)


class TestInitialState:
    """Tests for FilterState.initial."""

    def test_nothing_selected(self, state: FilterState) -> None:
        """Fresh state has no filter values."""
        assert state.filter_values == {}
        assert state.active_count == 0

    def test_leading_sections_expanded(self, state: FilterState) -> None:
        """First four sections start expanded."""
        assert state.is_expanded("price")
        assert state.is_expanded("rating")
        assert not state.is_expanded("size")

    def test_preselected_options_are_cleared(self, facets: list) -> None:
        """Checked flags coming from the builder are reset."""
        facets[1] = facets[1].toggled("red")
        assert FilterState.initial(facets).filter_values == {}


class TestOptionToggled:
    """Tests for checkbox toggling."""

    def test_toggle_selects_option(self, state: FilterState) -> None:
        """Toggling an option adds it to the filter values."""
        state = reduce(state, OptionToggled("color", "red"))
        assert state.filter_values == {"color": ["red"]}

    def test_toggle_twice_removes_key(self, state: FilterState) -> None:
        """Empty selections are omitted, not stored."""
        state = reduce(state, OptionToggled("color", "red"))
        state = reduce(state, OptionToggled("color", "red"))
        assert "color" not in state.filter_values

    def test_selection_in_display_order(self, state: FilterState) -> None:
        """Selected ids follow option order, not click order."""
        state = reduce(state, OptionToggled("color", "red"))
        state = reduce(state, OptionToggled("color", "black"))
        assert state.filter_values["color"] == ["black", "red"]

    def test_unknown_facet_raises(self, state: FilterState) -> None:
        """Events against a missing facet raise UnknownFacetError."""
        with pytest.raises(UnknownFacetError) as exc_info:
            reduce(state, OptionToggled("material", "wool"))
        assert exc_info.value.details["facet_id"] == "material"

    def test_toggle_on_range_facet_raises(self, state: FilterState) -> None:
        """Checkbox events against the range facet are rejected."""
        with pytest.raises(FacetKindMismatchError):
            reduce(state, OptionToggled("price", "100"))

    def test_resets_page(self, state: FilterState) -> None:
        """Any filter change sends the listing back to page 1."""
        state = replace(state, page=4)
        assert reduce(state, OptionToggled("color", "red")).page == 1


class TestRangeSet:
    """Tests for range selection."""

    def test_bounds_are_clamped(self, state: FilterState) -> None:
        """Out-of-range bounds clamp to [0, max]."""
        state = reduce(state, RangeSet("price", -50, 5000))
        price = state.facet("price")
        assert (price.current_min, price.current_max) == (0, 1000)
        assert "price" not in state.filter_values

    def test_inverted_bounds_are_swapped(self, state: FilterState) -> None:
        """min > max keeps currentMin <= currentMax."""
        state = reduce(state, RangeSet("price", 800, 200))
        assert state.filter_values["price"] == RangeValue(200, 800)

    def test_narrowed_range_is_a_filter(self, state: FilterState) -> None:
        """A narrowed range shows up in filter values and the badge."""
        state = reduce(state, RangeSet("price", 100, 500))
        assert state.filter_values == {"price": RangeValue(100, 500)}
        assert state.active_count == 1

    def test_malformed_min_falls_back_to_bound(self, state: FilterState) -> None:
        """Unparseable text falls back to the facet minimum."""
        state = reduce(state, RangeSet("price", 300, 600))
        state = reduce(state, RangeInputChanged("price", "min", "abc"))
        assert state.filter_values["price"] == RangeValue(0, 600)

    def test_empty_max_falls_back_to_bound(self, state: FilterState) -> None:
        """Empty max text falls back to the facet maximum."""
        state = reduce(state, RangeSet("price", 300, 600))
        state = reduce(state, RangeInputChanged("price", "max", ""))
        assert state.filter_values["price"] == RangeValue(300, 1000)

    def test_range_event_on_checkbox_raises(self, state: FilterState) -> None:
        """Range events against a checkbox facet are rejected."""
        with pytest.raises(FacetKindMismatchError):
            reduce(state, RangeSet("color", 0, 10))


class TestUiEvents:
    """Tests for expand and "View more" toggles."""

    def test_expand_does_not_touch_selection(self, state: FilterState) -> None:
        """Expanding a section changes only UI state."""
        selected = reduce(state, OptionToggled("color", "red"))
        toggled = reduce(selected, SectionExpandedToggled("size"))
        assert toggled.is_expanded("size")
        assert toggled.filter_values == selected.filter_values

    def test_ui_events_do_not_reset_page(self, state: FilterState) -> None:
        """UI-only events keep the current page."""
        state = replace(state, page=3)
        assert reduce(state, SectionExpandedToggled("color")).page == 3

    def test_view_more_shows_all_options(self, state: FilterState) -> None:
        """A long section shows five options until toggled."""
        assert len(state.visible_options("brand")) == 5
        assert state.has_more("brand")
        state = reduce(state, VisibleCountToggled("brand"))
        assert len(state.visible_options("brand")) == 7
        state = reduce(state, VisibleCountToggled("brand"))
        assert len(state.visible_options("brand")) == 5

    def test_short_section_has_no_more(self, state: FilterState) -> None:
        """Sections within the limit hide the affordance."""
        assert not state.has_more("color")

    def test_view_more_on_range_raises(self, state: FilterState) -> None:
        """The range facet has no option list."""
        with pytest.raises(FacetKindMismatchError):
            reduce(state, VisibleCountToggled("price"))


class TestActiveCount:
    """Tests for the applied-filter badge."""

    def test_counts_options_range_and_stock(self, state: FilterState) -> None:
        """Each checked option, a narrowed range and the stock flag count once."""
        state = reduce(state, OptionToggled("color", "red"))
        state = reduce(state, OptionToggled("brand", "a"))
        state = reduce(state, RangeSet("price", 0, 500))
        state = reduce(state, OutOfStockToggled())
        assert state.active_count == 4


class TestFiltersCleared:
    """Tests for clearing all filters."""

    @pytest.fixture
    def busy(self, state: FilterState) -> FilterState:
        """State with selections and UI changes."""
        for event in (
            OptionToggled("color", "red"),
            RangeSet("price", 100, 200),
            OutOfStockToggled(),
            SectionExpandedToggled("size"),
            VisibleCountToggled("brand"),
        ):
            state = reduce(state, event)
        return state

    def test_clear_resets_everything(self, busy: FilterState, state: FilterState) -> None:
        """Clear restores selections and UI defaults."""
        cleared = reduce(busy, FiltersCleared())
        assert cleared.filter_values == {}
        assert cleared.expanded == state.expanded
        assert cleared.show_all == frozenset()

    def test_clear_is_idempotent(self, busy: FilterState) -> None:
        """Clearing twice equals clearing once."""
        once = reduce(busy, FiltersCleared())
        twice = reduce(once, FiltersCleared())
        assert once == twice


class TestListingEvents:
    """Tests for sort and page events."""

    def test_sort_resets_page(self, state: FilterState) -> None:
        """Changing the sort goes back to page 1."""
        state = reduce(replace(state, page=3), SortChanged(SortOption.PRICE_ASC))
        assert state.sort == SortOption.PRICE_ASC
        assert state.page == 1

    def test_page_never_below_one(self, state: FilterState) -> None:
        """Page numbers are 1-based."""
        assert reduce(state, PageChanged(0)).page == 1
        assert reduce(state, PageChanged(3)).page == 3


class TestRestore:
    """Tests for restoring values read from the address."""

    def test_restore_keeps_known_options(self, state: FilterState) -> None:
        """Unknown option ids are dropped."""
        state = reduce(
            state,
            FiltersRestored(
                {
                    "color": ["red", "purple"],
                    "price": RangeValue(100, 500),
                    "inStock": True,
                }
            ),
        )
        assert state.filter_values == {
            "price": RangeValue(100, 500),
            "color": ["red"],
            "inStock": True,
        }

    def test_restore_replaces_previous_selection(self, state: FilterState) -> None:
        """Facets absent from the values are reset."""
        state = reduce(state, OptionToggled("brand", "a"))
        state = reduce(state, FiltersRestored({"color": ["blue"]}))
        assert state.filter_values == {"color": ["blue"]}


class TestRebuild:
    """Tests for merging a recomputed facet catalog."""

    def test_surviving_selections_kept(self, state: FilterState) -> None:
        """Options that still exist stay checked; vanished ones are dropped."""
        state = reduce(state, OptionToggled("color", "red"))
        state = reduce(state, OptionToggled("color", "blue"))
        rebuilt = rebuild(
            state,
            [RangeFacet.full("price", "Price", max=1000), _checkbox("color", "black", "blue")],
        )
        assert rebuilt.filter_values == {"color": ["blue"]}
        assert rebuilt.facet_ids == ["price", "color"]

    def test_range_clamped_into_new_bounds(self, state: FilterState) -> None:
        """A narrowed range shrinks with the new maximum."""
        state = reduce(state, RangeSet("price", 100, 800))
        rebuilt = rebuild(state, [RangeFacet.full("price", "Price", max=500)])
        assert rebuilt.filter_values == {"price": RangeValue(100, 500)}

    def test_range_reset_when_min_exceeds_new_max(self, state: FilterState) -> None:
        """A lower bound beyond the new maximum resets the range."""
        state = reduce(state, RangeSet("price", 600, 900))
        rebuilt = rebuild(state, [RangeFacet.full("price", "Price", max=500)])
        assert "price" not in rebuilt.filter_values

    def test_ui_state_of_removed_sections_dropped(self, state: FilterState) -> None:
        """Expanded ids only refer to existing sections."""
        rebuilt = rebuild(state, [_checkbox("color", "black")])
        assert rebuilt.expanded == frozenset({"color"})


class TestParseBound:
    """Tests for typed range bounds."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("250", 250),
            (" 1,200 ", 1200),
            ("99.5", 99.5),
            ("", 7),
            (None, 7),
            ("abc", 7),
            ("inf", 7),
            ("nan", 7),
        ],
    )
    def test_parse(self, raw: str | None, expected: float) -> None:
        """Malformed input falls back; integral values come back as int."""
        assert parse_bound(raw, 7) == expected
