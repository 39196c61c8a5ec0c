"""Tests for the demo catalog generator."""

import pytest

from facetbrowse.catalog.generator import (
    BRANDS,
    CATEGORIES,
    CatalogGenerator,
    GeneratorConfig,
)


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_small_config(self) -> None:
        """Small config creates a handful of items per category."""
        assert GeneratorConfig.small().products_per_category == 4

    def test_full_config(self) -> None:
        """Full config creates a larger catalog."""
        assert (
            GeneratorConfig.full().products_per_category
            > GeneratorConfig.small().products_per_category
        )


class TestCatalogGenerator:
    """Tests for CatalogGenerator."""

    @pytest.fixture
    def generator(self) -> CatalogGenerator:
        """Create generator with small config."""
        return CatalogGenerator(GeneratorConfig.small())

    def test_expected_count(self, generator: CatalogGenerator) -> None:
        """One batch of items per category."""
        items = generator.generate_list()
        assert len(items) == generator.expected_count == len(CATEGORIES) * 4

    def test_deterministic_generation(self) -> None:
        """Same seed produces the same catalog."""
        first = CatalogGenerator(GeneratorConfig(seed=7, products_per_category=3)).generate_list()
        second = CatalogGenerator(GeneratorConfig(seed=7, products_per_category=3)).generate_list()
        assert first == second

    def test_different_seeds_differ(self) -> None:
        """Different seeds produce different items."""
        first = CatalogGenerator(GeneratorConfig(seed=1, products_per_category=3)).generate_list()
        second = CatalogGenerator(GeneratorConfig(seed=2, products_per_category=3)).generate_list()
        assert [i.id for i in first] != [i.id for i in second]

    def test_items_are_well_formed(self, generator: CatalogGenerator) -> None:
        """Every item carries the fields the filter core needs."""
        for item in generator.generate():
            assert item.brand_name in BRANDS
            assert item.category in {c["slug"] for c in CATEGORIES}
            assert item.subcategory
            assert item.our_price % 10 == 9
            assert item.mrp >= item.our_price
            assert 1.0 <= item.average_rating <= 5.0
            assert item.attributes

    def test_storage_only_where_defined(self, generator: CatalogGenerator) -> None:
        """Apparel and TVs have no storage variant."""
        for item in generator.generate():
            if item.category in ("apparel", "televisions", "headphones"):
                assert item.storage == ""
            else:
                assert item.storage

    def test_generates_stock_outs(self) -> None:
        """Some items are out of stock."""
        config = GeneratorConfig(seed=42, products_per_category=30, out_of_stock_ratio=0.5)
        items = CatalogGenerator(config).generate_list()
        assert any(not item.in_stock for item in items)
        assert any(item.in_stock for item in items)
