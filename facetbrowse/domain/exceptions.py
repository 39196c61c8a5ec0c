"""Domain exceptions.

Errors raised when filter events or listing operations are used in a
way the current state cannot honour. Malformed user input (bad price
text, stale address keys) never raises; it degrades to safe defaults.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Facet Errors
# ============================================================================


class FacetError(DomainError):
    """Base class for facet-related errors."""

    pass


class UnknownFacetError(FacetError):
    """Raised when an event names a facet the current state does not contain."""

    def __init__(self, facet_id: str, available: list[str] | None = None) -> None:
        """Initialize unknown facet error.

        Args:
            facet_id: Facet identifier named by the event.
            available: Facet identifiers present in the state.
        """
        available = available or []
        super().__init__(
            f"Unknown facet '{facet_id}'. Available facets: {available}",
            details={"facet_id": facet_id, "available": available},
        )


class FacetKindMismatchError(FacetError):
    """Raised when a checkbox operation targets a range facet or vice versa."""

    def __init__(self, facet_id: str, expected: str, actual: str) -> None:
        """Initialize facet kind mismatch error.

        Args:
            facet_id: Facet identifier.
            expected: Kind required by the operation.
            actual: Kind of the facet in the state.
        """
        super().__init__(
            f"Facet '{facet_id}' is a {actual} facet, expected {expected}",
            details={"facet_id": facet_id, "expected": expected, "actual": actual},
        )


# ============================================================================
# Listing Errors
# ============================================================================


class ListingError(DomainError):
    """Base class for listing controller errors."""

    pass


class ListingNotMountedError(ListingError):
    """Raised when a listing is used before mount or after unmount."""

    def __init__(self, operation: str) -> None:
        """Initialize listing not mounted error.

        Args:
            operation: Name of the attempted operation.
        """
        super().__init__(
            f"Cannot {operation}: listing is not mounted",
            details={"operation": operation},
        )
