"""In-memory navigable address.

Stands in for a browser location/history pair: a path plus a stack of
query strings with a cursor. replace() overwrites the current entry;
push() adds one, as a link click would.
"""

import structlog
from starlette.datastructures import QueryParams

logger = structlog.get_logger()


class MemoryAddress:
    """Address port backed by an in-memory history stack."""

    def __init__(self, query: str | QueryParams = "", path: str = "/") -> None:
        """Initialize address.

        Args:
            query: Initial query string (without the leading "?").
            path: Path component, carried for display only.
        """
        self.path = path
        self._entries: list[QueryParams] = [QueryParams(query)]
        self._index = 0
        self.replace_count = 0

    def read(self) -> QueryParams:
        """Get the current entry's query parameters."""
        return self._entries[self._index]

    def replace(self, params: QueryParams) -> None:
        """Overwrite the current history entry."""
        self._entries[self._index] = QueryParams(params)
        self.replace_count += 1

    def push(self, params: QueryParams | str) -> None:
        """Navigate to a new entry, dropping any forward history."""
        del self._entries[self._index + 1 :]
        self._entries.append(QueryParams(params))
        self._index += 1
        logger.debug("Address navigated", query=str(self._entries[-1]))

    def back(self) -> bool:
        """Move to the previous entry; False when already at the first."""
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def forward(self) -> bool:
        """Move to the next entry; False when already at the last."""
        if self._index >= len(self._entries) - 1:
            return False
        self._index += 1
        return True

    @property
    def history_length(self) -> int:
        """Count history entries."""
        return len(self._entries)

    @property
    def query_string(self) -> str:
        """Get the current query string, URL-encoded."""
        return str(self.read())

    @property
    def url(self) -> str:
        """Get path plus query string."""
        query = self.query_string
        return f"{self.path}?{query}" if query else self.path
