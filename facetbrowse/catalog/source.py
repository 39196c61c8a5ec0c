"""Catalog data source.

The catalog data source is an external collaborator: it returns the full
item snapshot for a category. This module defines its interface and an
in-memory implementation backed by the demo generator.
"""

from typing import Iterable, Protocol

import structlog

from facetbrowse.catalog.builder import Scope
from facetbrowse.catalog.generator import CatalogGenerator, GeneratorConfig
from facetbrowse.catalog.models import Item

logger = structlog.get_logger()


class CatalogUnavailableError(Exception):
    """Raised by a catalog source when the snapshot cannot be fetched."""

    def __init__(self, message: str, category: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.category = category


class CatalogSource(Protocol):
    """Interface of the catalog data source."""

    def items_for_category(
        self, category: str, subcategory: str | None = None
    ) -> list[Item]:
        """Get every item of a category (optionally one subcategory)."""
        ...

    def all_items(self) -> list[Item]:
        """Get the whole catalog snapshot."""
        ...


class InMemoryCatalogSource:
    """Catalog source serving a fixed in-memory snapshot.

    Item order is preserved; upstream order encodes merchandising
    priority and is what the "featured" sort shows.
    """

    def __init__(self, items: Iterable[Item]) -> None:
        """Initialize source.

        Args:
            items: Catalog snapshot.
        """
        self._items = list(items)

    def items_for_category(
        self, category: str, subcategory: str | None = None
    ) -> list[Item]:
        """Get every item of a category (optionally one subcategory).

        Args:
            category: Category slug.
            subcategory: Optional subcategory slug.

        Returns:
            Matching items in catalog order.
        """
        return Scope.of(category, subcategory).filter(self._items)

    def all_items(self) -> list[Item]:
        """Get the whole catalog snapshot."""
        return list(self._items)

    def replace(self, items: Iterable[Item]) -> None:
        """Swap in a new snapshot."""
        self._items = list(items)
        logger.info("Catalog snapshot replaced", item_count=len(self._items))

    def __len__(self) -> int:
        return len(self._items)


# Global catalog source instance
_catalog_source: InMemoryCatalogSource | None = None


def get_catalog_source(
    seed: int = 42,
    products_per_category: int = 8,
) -> InMemoryCatalogSource:
    """Get or create the catalog source instance.

    Args:
        seed: Random seed for the demo catalog.
        products_per_category: Demo items per category.

    Returns:
        InMemoryCatalogSource instance.
    """
    global _catalog_source
    if _catalog_source is None:
        generator = CatalogGenerator(
            GeneratorConfig(seed=seed, products_per_category=products_per_category)
        )
        _catalog_source = InMemoryCatalogSource(generator.generate())
        logger.info(
            "Demo catalog generated",
            seed=seed,
            item_count=len(_catalog_source),
        )
    return _catalog_source
