"""Facet value objects.

A facet is one filterable dimension of the catalog. Facets are a tagged
variant: a CheckboxFacet carries discrete options, a RangeFacet carries
numeric bounds plus the currently selected sub-range. Both are immutable;
every mutation returns a new facet.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Self

from facetbrowse.domain.base import ValueObject

Number = int | float


class FacetKind(str, Enum):
    """Facet variants."""

    CHECKBOX = "checkbox"
    RANGE = "range"


# ============================================================================
# Checkbox Facet
# ============================================================================


@dataclass(frozen=True)
class CheckboxOption(ValueObject):
    """One selectable option of a checkbox facet.

    Attributes:
        id: Normalized option identifier (what the address stores).
        label: Display label.
        checked: Whether the option is selected.
    """

    id: str
    label: str
    checked: bool = False


@dataclass(frozen=True)
class CheckboxFacet(ValueObject):
    """Facet with discrete, independently selectable options."""

    id: str
    title: str
    options: tuple[CheckboxOption, ...] = ()

    kind = FacetKind.CHECKBOX

    @property
    def selected_ids(self) -> list[str]:
        """Get ids of checked options in display order."""
        return [option.id for option in self.options if option.checked]

    @property
    def checked_count(self) -> int:
        """Count checked options."""
        return sum(1 for option in self.options if option.checked)

    def has_option(self, option_id: str) -> bool:
        """Check if an option with the given id exists."""
        return any(option.id == option_id for option in self.options)

    def toggled(self, option_id: str) -> Self:
        """Flip one option's checked flag.

        Unknown option ids leave the facet unchanged.

        Args:
            option_id: Normalized option id.

        Returns:
            New facet with the option flipped.
        """
        return replace(
            self,
            options=tuple(
                replace(option, checked=not option.checked)
                if option.id == option_id
                else option
                for option in self.options
            ),
        )

    def with_selection(self, option_ids: set[str]) -> Self:
        """Check exactly the given options, uncheck everything else."""
        return replace(
            self,
            options=tuple(
                replace(option, checked=option.id in option_ids)
                for option in self.options
            ),
        )

    def cleared(self) -> Self:
        """Uncheck every option."""
        return self.with_selection(set())


# ============================================================================
# Range Facet
# ============================================================================


@dataclass(frozen=True)
class RangeFacet(ValueObject):
    """Facet bounded by a numeric minimum/maximum with a selected sub-range.

    Invariant: 0 <= min <= current_min <= current_max <= max.
    """

    id: str
    title: str
    min: Number
    max: Number
    current_min: Number
    current_max: Number
    step: Number = 10

    kind = FacetKind.RANGE

    @classmethod
    def full(cls, id: str, title: str, max: Number, step: Number = 10) -> Self:
        """Create a range facet spanning [0, max] with nothing narrowed."""
        return cls(
            id=id,
            title=title,
            min=0,
            max=max,
            current_min=0,
            current_max=max,
            step=step,
        )

    @property
    def is_narrowed(self) -> bool:
        """Check if the selected sub-range differs from the full bounds."""
        return self.current_min != self.min or self.current_max != self.max

    def clamp(self, value: Number) -> Number:
        """Clamp a value into [min, max]."""
        return max(self.min, min(value, self.max))

    def with_bounds(self, low: Number, high: Number) -> Self:
        """Set the selected sub-range.

        Both bounds are clamped to the facet bounds; if the low bound
        still exceeds the high bound they are swapped.

        Args:
            low: Requested lower bound.
            high: Requested upper bound.

        Returns:
            New facet with the clamped sub-range.
        """
        low, high = self.clamp(low), self.clamp(high)
        if low > high:
            low, high = high, low
        return replace(self, current_min=low, current_max=high)

    def cleared(self) -> Self:
        """Reset the selected sub-range to the full bounds."""
        return replace(self, current_min=self.min, current_max=self.max)


Facet = CheckboxFacet | RangeFacet
