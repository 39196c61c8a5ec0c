"""Listing presentation adapter.

Turns a paginated pipeline result into what the listing view renders:
header text, windowed pagination controls and a status that keeps
"loading", "no products found" and "catalog failed" apart.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from facetbrowse.application.pipeline import PaginatedResult
from facetbrowse.catalog.labels import humanize_slug

T = TypeVar("T")


class ListingStatus(str, Enum):
    """What the listing area shows."""

    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


def header_text(total: int, category: str | None = None, query: str | None = None) -> str:
    """Build the listing header.

    >>> header_text(12, "smart-phones")
    '12 Products in Smart Phones'
    >>> header_text(3, query="red shirt")
    '3 Products for "red shirt"'
    """
    text = f"{total} Products"
    if category:
        text += f" in {humanize_slug(category)}"
    if query and query.strip():
        text += f' for "{query.strip()}"'
    return text


def page_window(current: int, total_pages: int) -> list[int | None]:
    """Compute the page buttons to show.

    Page 1, the last page and the pages next to the current one are
    shown; None marks an ellipsis two pages away from the current one.
    A single page gets no buttons at all.

    Args:
        current: Current page (1-based).
        total_pages: Number of pages.

    Returns:
        Page numbers and ellipsis markers in display order.
    """
    if total_pages <= 1:
        return []
    window: list[int | None] = []
    for page in range(1, total_pages + 1):
        if page in (1, total_pages) or abs(page - current) <= 1:
            window.append(page)
        elif abs(page - current) == 2:
            window.append(None)
    return window


@dataclass(frozen=True)
class PaginationControls:
    """Pagination bar state."""

    pages: list[int | None] = field(default_factory=list)
    prev_disabled: bool = True
    next_disabled: bool = True

    @property
    def visible(self) -> bool:
        """Check if the bar is rendered at all."""
        return bool(self.pages)


@dataclass(frozen=True)
class ListingPage(Generic[T]):
    """One rendered page of the listing."""

    status: ListingStatus
    items: list[T]
    total: int
    page: int
    page_size: int
    total_pages: int
    header: str
    controls: PaginationControls

    @property
    def has_more(self) -> bool:
        """Check if pages follow this one."""
        return self.page < self.total_pages


def present(
    result: PaginatedResult[T],
    category: str | None = None,
    query: str | None = None,
) -> ListingPage[T]:
    """Render a paginated pipeline result.

    Args:
        result: Page of the pipeline output.
        category: Category scope, used in the header.
        query: Search query, used in the header.

    Returns:
        Listing page.
    """
    return ListingPage(
        status=ListingStatus.EMPTY if result.is_empty else ListingStatus.READY,
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        header=header_text(result.total, category, query),
        controls=PaginationControls(
            pages=page_window(result.page, result.total_pages),
            prev_disabled=not result.has_prev,
            next_disabled=not result.has_next,
        ),
    )
