"""Catalog side of facetbrowse.

Item model, label normalization, the facet catalog builder, the demo
catalog generator and the catalog data source.
"""

from facetbrowse.catalog.builder import FacetCatalogBuilder, Scope, round_max_price
from facetbrowse.catalog.generator import CatalogGenerator, GeneratorConfig
from facetbrowse.catalog.models import Brand, Item
from facetbrowse.catalog.source import (
    CatalogSource,
    CatalogUnavailableError,
    InMemoryCatalogSource,
    get_catalog_source,
)

__all__ = [
    # Models
    "Brand",
    "Item",
    # Builder
    "FacetCatalogBuilder",
    "Scope",
    "round_max_price",
    # Generator
    "CatalogGenerator",
    "GeneratorConfig",
    # Source
    "CatalogSource",
    "CatalogUnavailableError",
    "InMemoryCatalogSource",
    "get_catalog_source",
]
