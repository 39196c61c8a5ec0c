"""Facet catalog builder.

Derives the facet sections to render from an item snapshot and the
active category/subcategory scope. Facet options are always computed
from in-scope items only.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Self

import structlog

from facetbrowse.catalog.labels import (
    capacity_value,
    format_label,
    humanize_slug,
    is_capacity_key,
    normalize_value,
    stringify,
    title_from_key,
)
from facetbrowse.catalog.models import Item
from facetbrowse.domain.facets import CheckboxFacet, CheckboxOption, Facet, RangeFacet
from facetbrowse.domain.filters import (
    BRAND_FACET,
    CATEGORY_FACET,
    COLOR_FACET,
    IN_STOCK_FLAG,
    PRICE_FACET,
    RATING_FACET,
    STORAGE_FACET,
)

logger = structlog.get_logger()


# ============================================================================
# Constants
# ============================================================================

# Facets with a fixed meaning, in display order
KNOWN_FACETS = (
    PRICE_FACET,
    CATEGORY_FACET,
    RATING_FACET,
    COLOR_FACET,
    STORAGE_FACET,
    BRAND_FACET,
)

FACET_TITLES = {
    PRICE_FACET: "Price",
    CATEGORY_FACET: "Categories",
    RATING_FACET: "Rating",
    COLOR_FACET: "Color",
    STORAGE_FACET: "Storage",
    BRAND_FACET: "Brands",
}

# Address keys that can never become dynamic attribute facets
RESERVED_KEYS = frozenset(
    {"subcategory", "minPrice", "maxPrice", IN_STOCK_FLAG, "page", "sort", "q"}
)

DEFAULT_PRICE_MAX = 1000


# ============================================================================
# Scope
# ============================================================================


@dataclass(frozen=True)
class Scope:
    """Category/subcategory restriction applied before faceting and filtering.

    Attributes:
        category: Category slug, matched case-insensitively.
        subcategory: Subcategory slug, matched case-insensitively.
    """

    category: str | None = None
    subcategory: str | None = None

    @classmethod
    def of(cls, category: str | None = None, subcategory: str | None = None) -> Self:
        """Create a scope, treating blank values as absent."""
        return cls(
            category=category.strip() or None if category else None,
            subcategory=subcategory.strip() or None if subcategory else None,
        )

    @property
    def is_empty(self) -> bool:
        """Check if the scope restricts nothing."""
        return not self.category and not self.subcategory

    def contains(self, item: Item) -> bool:
        """Check if an item falls within the scope."""
        if self.category and item.category.strip().casefold() != self.category.casefold():
            return False
        if (
            self.subcategory
            and item.subcategory.strip().casefold() != self.subcategory.casefold()
        ):
            return False
        return True

    def filter(self, items: Iterable[Item]) -> list[Item]:
        """Keep in-scope items, preserving order."""
        if self.is_empty:
            return list(items)
        return [item for item in items if self.contains(item)]


# ============================================================================
# Helpers
# ============================================================================


def round_max_price(max_price: float) -> int:
    """Round a price ceiling up to an aesthetic bound.

    Nearest 100 up to 1000, nearest 1000 above; non-positive values
    give the default bound.

    >>> round_max_price(417)
    500
    >>> round_max_price(1417)
    2000
    """
    if max_price <= 0:
        return DEFAULT_PRICE_MAX
    if max_price <= 1000:
        return int(math.ceil(max_price / 100) * 100)
    return int(math.ceil(max_price / 1000) * 1000)


def floor_rating(rating: float) -> int:
    """Floor an average rating to whole stars."""
    return int(math.floor(rating))


def item_facet_value(item: Item, facet_id: str) -> str | None:
    """Get the raw value an item holds for a checkbox facet.

    Returns None when the item has no value for the facet.
    """
    if facet_id == CATEGORY_FACET:
        value = item.category
    elif facet_id == COLOR_FACET:
        value = item.color
    elif facet_id == STORAGE_FACET:
        value = item.storage
    elif facet_id == BRAND_FACET:
        value = item.brand_name
    else:
        raw = item.attributes.get(facet_id)
        if raw is None:
            return None
        value = stringify(raw)
    return value if value and value.strip() else None


def _build_options(values: Iterable[str], key: str) -> tuple[CheckboxOption, ...]:
    """Build de-duplicated, ordered checkbox options from raw values."""
    seen: dict[str, str] = {}
    for value in values:
        option_id = normalize_value(value)
        if option_id and option_id not in seen:
            seen[option_id] = value
    if is_capacity_key(key):
        ordered = sorted(seen, key=lambda option_id: (capacity_value(option_id), option_id))
    else:
        ordered = sorted(seen)
    return tuple(
        CheckboxOption(id=option_id, label=_option_label(seen[option_id], key))
        for option_id in ordered
    )


def _option_label(value: str, key: str) -> str:
    if key == CATEGORY_FACET:
        return humanize_slug(value)
    return format_label(value, key)


# ============================================================================
# Builder
# ============================================================================


class FacetCatalogBuilder:
    """Builds facet sections from an item snapshot.

    The builder is pure: the same items and scope always produce the
    same sections.

    Example usage:
        builder = FacetCatalogBuilder()
        facets = builder.build(items, Scope.of("mobiles"))
    """

    def __init__(self, price_step: int = 10) -> None:
        """Initialize builder.

        Args:
            price_step: Slider step of the price range facet.
        """
        self.price_step = price_step

    def build(self, items: Iterable[Item], scope: Scope | None = None) -> list[Facet]:
        """Build facet sections for the in-scope items.

        Order: price, category, rating, color, storage, brand, then
        dynamic attribute facets in key-encounter order. Checkbox facets
        without options are omitted; an empty scope yields no facets.

        Args:
            items: Full item snapshot.
            scope: Optional category/subcategory scope.

        Returns:
            Ordered facet sections.
        """
        scoped = (scope or Scope()).filter(items)
        if not scoped:
            return []

        facets: list[Facet] = [self._price_facet(scoped)]
        for facet_id in (CATEGORY_FACET, RATING_FACET, COLOR_FACET, STORAGE_FACET, BRAND_FACET):
            facet = (
                self._rating_facet(scoped)
                if facet_id == RATING_FACET
                else self._checkbox_facet(scoped, facet_id, FACET_TITLES[facet_id])
            )
            if facet.options:
                facets.append(facet)

        for key in self._attribute_keys(scoped):
            facet = self._checkbox_facet(scoped, key, title_from_key(key))
            if facet.options:
                facets.append(facet)

        logger.debug(
            "Facet catalog built",
            category=scope.category if scope else None,
            subcategory=scope.subcategory if scope else None,
            items=len(scoped),
            facets=[f.id for f in facets],
        )
        return facets

    def _price_facet(self, items: list[Item]) -> RangeFacet:
        highest = max((item.our_price for item in items), default=0)
        return RangeFacet.full(
            id=PRICE_FACET,
            title=FACET_TITLES[PRICE_FACET],
            max=round_max_price(highest),
            step=self.price_step,
        )

    def _rating_facet(self, items: list[Item]) -> CheckboxFacet:
        ratings = {floor_rating(item.average_rating) for item in items}
        stars = sorted((r for r in ratings if 1 <= r <= 5), reverse=True)
        return CheckboxFacet(
            id=RATING_FACET,
            title=FACET_TITLES[RATING_FACET],
            options=tuple(
                CheckboxOption(id=str(r), label=f"{r} Star{'s' if r > 1 else ''} & Up")
                for r in stars
            ),
        )

    def _checkbox_facet(self, items: list[Item], facet_id: str, title: str) -> CheckboxFacet:
        values = (item_facet_value(item, facet_id) for item in items)
        return CheckboxFacet(
            id=facet_id,
            title=title,
            options=_build_options((v for v in values if v is not None), facet_id),
        )

    @staticmethod
    def _attribute_keys(items: list[Item]) -> list[str]:
        """Collect dynamic attribute keys in first-encounter order."""
        keys: dict[str, None] = {}
        for item in items:
            for key in item.attributes:
                if key in KNOWN_FACETS or key in RESERVED_KEYS or key in keys:
                    continue
                keys[key] = None
        return list(keys)
