"""Shared fixtures for facetbrowse tests."""

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

import facetbrowse.catalog.source as source_module
from facetbrowse.catalog.models import Brand, Item
from facetbrowse.catalog.source import InMemoryCatalogSource
from facetbrowse.infrastructure.scheduling import ManualScheduler


@pytest.fixture(autouse=True)
def reset_catalog_source():
    """Reset the global catalog source before each test."""
    source_module._catalog_source = None
    yield
    source_module._catalog_source = None


def _make_item(id: str, brand: str | None = None, **fields: Any) -> Item:
    fields.setdefault("name", id)
    return Item(id=id, brand=Brand(id=brand.lower(), name=brand) if brand else None, **fields)


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Get a factory for items with keyword overrides."""
    return _make_item


@pytest.fixture
def phone_items() -> list[Item]:
    """Three mobiles across two subcategories."""
    return [
        _make_item(
            "p1",
            name="Acme Nova 5G",
            category="mobiles",
            subcategory="smartphones",
            brand="Acme",
            color="Black",
            storage="128GB",
            our_price=19999,
            mrp=24999,
            average_rating=4.3,
            stock=10,
            created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
            attributes={"ram": "8GB", "network": "5G"},
            tags=("android",),
        ),
        _make_item(
            "p2",
            name="Contoso Edge",
            category="mobiles",
            subcategory="smartphones",
            brand="Contoso",
            color="Blue",
            storage="256GB",
            our_price=34999,
            mrp=39999,
            average_rating=3.8,
            stock=0,
            created_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
            attributes={"ram": "12GB", "network": "5G"},
            tags=("android",),
        ),
        _make_item(
            "p3",
            name="Globex Lite",
            category="mobiles",
            subcategory="feature-phones",
            brand="Globex",
            color="Black",
            our_price=2499,
            mrp=2999,
            average_rating=2.9,
            stock=5,
            created_at=datetime(2023, 12, 1, tzinfo=timezone.utc),
            attributes={"network": "4G"},
        ),
    ]


@pytest.fixture
def shirt_items() -> list[Item]:
    """Two apparel items for search scenarios."""
    return [
        _make_item(
            "s1",
            name="Red Cotton Shirt",
            category="apparel",
            subcategory="t-shirts",
            brand="Tailwind",
            color="Red",
            our_price=799,
            mrp=999,
            average_rating=4.6,
            stock=20,
            description="Soft cotton tee",
            attributes={"size": "M"},
            tags=("clothing",),
        ),
        _make_item(
            "s2",
            name="Blue Shirt",
            category="apparel",
            subcategory="t-shirts",
            brand="Tailwind",
            color="Blue",
            our_price=599,
            mrp=799,
            average_rating=3.2,
            stock=0,
            description="Classic fit",
            attributes={"size": "L"},
            tags=("clothing",),
        ),
    ]


@pytest.fixture
def catalog_items(phone_items: list[Item], shirt_items: list[Item]) -> list[Item]:
    """Whole test catalog in merchandising order."""
    return phone_items + shirt_items


@pytest.fixture
def catalog_source(catalog_items: list[Item]) -> InMemoryCatalogSource:
    """Create an in-memory catalog source over the test catalog."""
    return InMemoryCatalogSource(catalog_items)


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a virtual-clock scheduler."""
    return ManualScheduler()
