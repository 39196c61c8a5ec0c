"""Composed filter + listing controller.

FilterListing owns one FilterState for the lifetime of a listing view
and drives the data flow:

    catalog snapshot -> facet catalog -> FilterState <-> address
    FilterState -> (debounced) pipeline -> listing page

Every filter-changing event updates the state, writes the address
synchronously and re-arms the debounced pipeline trigger. UI-only
events (section expand, "View more") touch neither.
"""

from dataclasses import replace

import structlog

from facetbrowse.application.address import (
    QUERY_PARAM,
    SUBCATEGORY_PARAM,
    AddressPort,
    AddressSynchronizer,
)
from facetbrowse.application.debounce import Debouncer
from facetbrowse.application.pipeline import (
    PaginationParams,
    filter_items,
    paginate,
    run_pipeline,
)
from facetbrowse.application.presentation import ListingPage, ListingStatus, present
from facetbrowse.catalog.builder import FacetCatalogBuilder, Scope
from facetbrowse.catalog.models import Item
from facetbrowse.catalog.source import CatalogSource, CatalogUnavailableError
from facetbrowse.domain.base import FilterEvent
from facetbrowse.domain.events import FiltersRestored, PageChanged, SortChanged
from facetbrowse.domain.exceptions import ListingNotMountedError
from facetbrowse.domain.facets import Facet
from facetbrowse.domain.filters import FilterValues
from facetbrowse.domain.state import FilterState, rebuild, reduce
from facetbrowse.infrastructure.scheduling import Scheduler

logger = structlog.get_logger()


class FilterListing:
    """Filter panel and product listing of one catalog view.

    Example usage:
        listing = FilterListing(source, MemoryAddress("color=red"), scheduler)
        listing.mount("mobiles")
        listing.dispatch(OptionToggled("brand", "acme"))
        scheduler.advance(0.3)
        print(listing.result.header)
    """

    def __init__(
        self,
        source: CatalogSource,
        address: AddressPort,
        scheduler: Scheduler,
        builder: FacetCatalogBuilder | None = None,
        page_size: int = 24,
        debounce_seconds: float = 0.3,
        visible_options: int = 5,
        expanded_sections: int = 4,
    ) -> None:
        """Initialize listing.

        Args:
            source: Catalog data source.
            address: Navigable address port.
            scheduler: Scheduler owning the debounce timer.
            builder: Facet catalog builder.
            page_size: Items per page.
            debounce_seconds: Debounce window of pipeline runs.
            visible_options: Options shown per section before "View more".
            expanded_sections: Leading sections expanded by default.
        """
        self.source = source
        self.address = AddressSynchronizer(address)
        self.builder = builder or FacetCatalogBuilder()
        self.page_size = page_size
        self.visible_options = visible_options
        self.expanded_sections = expanded_sections
        self._debouncer = Debouncer(scheduler, debounce_seconds)

        self._mounted = False
        self._items: list[Item] = []
        self._scope = Scope()
        self._query: str | None = None
        self._state = FilterState()
        self._result: ListingPage[Item] | None = None
        self._status = ListingStatus.LOADING
        self.runs = 0

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def mounted(self) -> bool:
        """Check if the listing is mounted."""
        return self._mounted

    @property
    def state(self) -> FilterState:
        """Get the current filter state."""
        return self._state

    @property
    def facets(self) -> tuple[Facet, ...]:
        """Get facet sections with their selection state."""
        return self._state.facets

    @property
    def filter_values(self) -> FilterValues:
        """Get the canonical filter values."""
        return self._state.filter_values

    @property
    def active_count(self) -> int:
        """Get the applied-filter badge count."""
        return self._state.active_count

    @property
    def scope(self) -> Scope:
        """Get the category/subcategory scope."""
        return self._scope

    @property
    def query(self) -> str | None:
        """Get the free-text query."""
        return self._query

    @property
    def status(self) -> ListingStatus:
        """Get what the listing area currently shows."""
        return self._status

    @property
    def result(self) -> ListingPage[Item] | None:
        """Get the latest rendered page (None until the first run)."""
        return self._result

    @property
    def pending(self) -> bool:
        """Check if a pipeline run is scheduled."""
        return self._debouncer.pending

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(
        self,
        category: str | None = None,
        subcategory: str | None = None,
        query: str | None = None,
    ) -> None:
        """Load the scope and seed the filter state from the address.

        Subcategory and query default to the address's subcategory and
        q parameters. When the address carries no filter, sort or page
        keys the unfiltered listing is computed right away; otherwise
        the state is restored and exactly one pipeline run is triggered.

        Args:
            category: Category slug.
            subcategory: Subcategory slug.
            query: Free-text query.
        """
        params = self.address.read()
        if subcategory is None:
            subcategory = params.get(SUBCATEGORY_PARAM)
        if query is None:
            query = params.get(QUERY_PARAM)

        self._mounted = True
        self._scope = Scope.of(category, subcategory)
        self._query = query.strip() or None if query else None
        logger.info(
            "Listing mounted",
            category=self._scope.category,
            subcategory=self._scope.subcategory,
            query=self._query,
        )

        if not self._load_scope():
            return

        if not self.address.has_listing_params(self._state.facets):
            self._run()
            return

        values, sort, page = self.address.restore(list(self._state.facets))
        self._state = replace(
            reduce(self._state, FiltersRestored(values)), sort=sort, page=page
        )
        logger.info(
            "Filters restored from address",
            filters=sorted(values),
            sort=sort.value,
            page=page,
        )
        self._trigger()

    def unmount(self) -> None:
        """Tear down, cancelling any pending pipeline run."""
        self._debouncer.cancel()
        self._mounted = False
        logger.info("Listing unmounted", category=self._scope.category)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def dispatch(self, event: FilterEvent) -> FilterState:
        """Apply one user interaction.

        Args:
            event: Filter event.

        Returns:
            New filter state.

        Raises:
            ListingNotMountedError: If the listing is not mounted.
            UnknownFacetError: If the event names an unknown facet.
            FacetKindMismatchError: If the event targets the wrong facet kind.
        """
        self._require_mounted("dispatch")

        if isinstance(event, PageChanged) and not self._page_in_range(event.page):
            logger.debug("Page out of range ignored", page=event.page)
            return self._state

        self._state = reduce(self._state, event)
        logger.debug("Filter event applied", event_type=event.event_type)

        if event.changes_filters:
            self.address.write(self._state.filter_values, self._state.facets)
        elif isinstance(event, SortChanged):
            self.address.write_sort(self._state.sort)
        elif isinstance(event, PageChanged):
            self.address.write_page(self._state.page)

        if event.reruns_listing:
            self._trigger()
        return self._state

    def set_scope(self, category: str | None, subcategory: str | None = None) -> None:
        """Switch to another category scope.

        The filter state is rebuilt from scratch for the new scope; no
        selection carries over. Filter keys and page are cleared from
        the address and the subcategory key is rewritten.

        Args:
            category: New category slug.
            subcategory: New subcategory slug.
        """
        self._require_mounted("change scope")
        self._change_scope(Scope.of(category, subcategory), self._query)

    def set_query(self, query: str | None) -> None:
        """Switch to another free-text query, resetting filters and rewriting q."""
        self._require_mounted("change query")
        self._change_scope(self._scope, query.strip() or None if query else None)

    def refresh_snapshot(self, items: list[Item] | None = None) -> None:
        """Recompute facets from a refreshed catalog snapshot.

        Selections whose options still exist are kept; the price range
        is clamped into the new bounds.

        Args:
            items: New snapshot. Fetched from the source when omitted.
        """
        self._require_mounted("refresh snapshot")
        if items is None:
            try:
                items = self._fetch()
            except CatalogUnavailableError as e:
                self._fail(e)
                return
        self._items = list(items)
        if self._status is ListingStatus.ERROR:
            self._status = ListingStatus.LOADING
        self._state = rebuild(self._state, self._build_facets())
        self.address.write(self._state.filter_values, self._state.facets)
        logger.info("Catalog snapshot refreshed", item_count=len(self._items))
        self._trigger()

    def flush(self) -> bool:
        """Run a pending pipeline execution immediately.

        Returns:
            True if a run was pending.
        """
        return self._debouncer.flush()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_mounted(self, operation: str) -> None:
        if not self._mounted:
            raise ListingNotMountedError(operation)

    def _page_in_range(self, page: int) -> bool:
        if self._result is None:
            return page >= 1
        return 1 <= page <= self._result.total_pages

    def _fetch(self) -> list[Item]:
        if self._scope.category:
            return self.source.items_for_category(
                self._scope.category, self._scope.subcategory
            )
        return self.source.all_items()

    def _build_facets(self) -> list[Facet]:
        # Search listings facet over the query-matching items only
        items = filter_items(self._items, {}, query=self._query, scope=self._scope)
        return self.builder.build(items, self._scope)

    def _load_scope(self) -> bool:
        try:
            self._items = self._fetch()
        except CatalogUnavailableError as e:
            self._fail(e)
            return False
        self._state = FilterState.initial(
            self._build_facets(),
            expanded_sections=self.expanded_sections,
            visible_limit=self.visible_options,
            sort=self._state.sort,
        )
        self._status = ListingStatus.LOADING
        return True

    def _change_scope(self, scope: Scope, query: str | None) -> None:
        self._debouncer.cancel()
        self._scope = scope
        self._query = query
        self._result = None
        previous_facets = self._state.facets
        logger.info(
            "Listing scope changed",
            category=scope.category,
            subcategory=scope.subcategory,
            query=query,
        )
        if not self._load_scope():
            self.address.write_scope(scope.subcategory, query, previous_facets)
            return
        self.address.write_scope(
            scope.subcategory, query, (*previous_facets, *self._state.facets)
        )
        self._trigger()

    def _fail(self, error: CatalogUnavailableError) -> None:
        self._debouncer.cancel()
        self._items = []
        self._state = FilterState.initial([], sort=self._state.sort)
        self._result = None
        self._status = ListingStatus.ERROR
        logger.warning(
            "Catalog unavailable",
            category=error.category or self._scope.category,
            error=error.message,
        )

    def _trigger(self) -> None:
        # A failed fetch stays visible until the catalog loads again
        if self._status is ListingStatus.ERROR:
            return
        self._debouncer.trigger(self._run)

    def _run(self) -> None:
        if not self._mounted or self._status is ListingStatus.ERROR:
            return
        ordered = run_pipeline(
            self._items,
            self._state.filter_values,
            sort=self._state.sort,
            query=self._query,
            scope=self._scope,
        )
        paged = paginate(ordered, PaginationParams(self._state.page, self.page_size))
        if paged.total_pages and paged.page > paged.total_pages:
            # Page restored from a stale address no longer exists
            self._state = replace(self._state, page=1)
            self.address.write_page(1)
            paged = paginate(ordered, PaginationParams(1, self.page_size))

        self._result = present(paged, category=self._scope.category, query=self._query)
        self._status = self._result.status
        self.runs += 1
        logger.info(
            "Pipeline executed",
            matched=paged.total,
            total=len(self._items),
            page=paged.page,
            sort=self._state.sort.value,
            status=self._status.value,
        )
