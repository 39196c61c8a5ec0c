"""Tests for catalog item parsing and the in-memory source."""

from datetime import datetime, timezone

from facetbrowse.catalog.models import Item
from facetbrowse.catalog.source import InMemoryCatalogSource, get_catalog_source


class TestItemFromRecord:
    """Tests for Item.from_record."""

    def test_camel_case_record(self) -> None:
        """Records from the catalog collaborator parse fully."""
        item = Item.from_record(
            {
                "id": "v1",
                "productId": "p1",
                "name": "Acme Nova",
                "category": "mobiles",
                "subcategory": "smartphones",
                "brand": {"id": "b1", "name": "Acme"},
                "color": "Black",
                "storage": "128GB",
                "ourPrice": "19,999",
                "mrp": 24999,
                "averageRating": "4.3",
                "totalStocks": "12",
                "createdAt": "2024-03-01T10:00:00Z",
                "attributes": {"ram": "8GB", "dualSim": True, "specs": {"x": 1}},
                "tags": ["android", ""],
            }
        )
        assert item.brand_name == "Acme"
        assert item.our_price == 19999
        assert item.average_rating == 4.3
        assert item.stock == 12
        assert item.created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
        assert item.attributes == {"ram": "8GB", "dualSim": True}
        assert item.tags == ("android",)

    def test_missing_values_default(self) -> None:
        """Missing or broken fields degrade to empty and zero."""
        item = Item.from_record({"id": "v2", "brand": None, "ourPrice": "n/a"})
        assert item.brand is None
        assert item.brand_name == ""
        assert item.our_price == 0
        assert item.stock == 0
        assert not item.in_stock

    def test_discount_percent(self, make_item) -> None:
        """Discount is computed off the list price."""
        assert make_item("x", our_price=750, mrp=1000).discount_percent == 25
        assert make_item("y", our_price=100, mrp=0).discount_percent == 0


class TestInMemoryCatalogSource:
    """Tests for InMemoryCatalogSource."""

    def test_items_for_category(self, catalog_source: InMemoryCatalogSource) -> None:
        """Category lookup preserves catalog order."""
        items = catalog_source.items_for_category("mobiles")
        assert [i.id for i in items] == ["p1", "p2", "p3"]

    def test_items_for_subcategory(self, catalog_source: InMemoryCatalogSource) -> None:
        """Subcategory narrows the category."""
        items = catalog_source.items_for_category("mobiles", "feature-phones")
        assert [i.id for i in items] == ["p3"]

    def test_replace_snapshot(self, catalog_source: InMemoryCatalogSource) -> None:
        """A replaced snapshot is served from then on."""
        catalog_source.replace([])
        assert len(catalog_source) == 0
        assert catalog_source.all_items() == []

    def test_global_source_is_singleton(self) -> None:
        """The demo source is generated once."""
        source = get_catalog_source(seed=3, products_per_category=2)
        assert get_catalog_source() is source
        assert len(source) == 10
