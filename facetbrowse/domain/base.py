"""Base classes for domain layer.

Provides the foundational abstractions shared by facets, filter
values and filter events.
"""

from abc import ABC
from dataclasses import dataclass
from typing import ClassVar


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class RangeValue(ValueObject):
            min: float
            max: float
    """

    pass


# ============================================================================
# Filter Event Base
# ============================================================================


@dataclass(frozen=True)
class FilterEvent(ABC):
    """Base class for filter events.

    A filter event describes one discrete user interaction with the
    filter panel. Events are immutable and are applied to a FilterState
    by the reducer.

    Attributes:
        event_type: String identifier for the event type (set by subclass).
        changes_filters: Whether applying the event changes the canonical
            filter values (and therefore the address filter keys).
        reruns_listing: Whether the listing must be recomputed afterwards.
    """

    event_type: ClassVar[str]
    changes_filters: ClassVar[bool] = True
    reruns_listing: ClassVar[bool] = True
