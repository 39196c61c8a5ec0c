"""Tests for listing, search and facet endpoints."""

from fastapi.testclient import TestClient

from facetbrowse.api.listing import get_source
from facetbrowse.catalog.source import CatalogUnavailableError
from facetbrowse.main import app


class TestCategoryListing:
    """Tests for GET /categories/{category}/products."""

    def test_unfiltered(self, fixed_client: TestClient) -> None:
        """A bare category lists everything in it."""
        response = fixed_client.get("/categories/mobiles/products")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["total"] == 3
        assert data["header"] == "3 Products in Mobiles"
        assert [item["id"] for item in data["items"]] == ["p1", "p2", "p3"]
        assert data["filters"] == {}
        assert data["active_count"] == 0
        assert data["pagination"]["pages"] == []

    def test_facets_in_response(self, fixed_client: TestClient) -> None:
        """Facet sections carry checked state and UI defaults."""
        data = fixed_client.get("/categories/mobiles/products?color=black").json()
        facets = {f["id"]: f for f in data["facets"]}
        assert list(facets)[:3] == ["price", "category", "rating"]
        assert facets["price"]["kind"] == "range"
        assert facets["price"]["max"] == 35000
        assert facets["price"]["expanded"]
        checked = [o["id"] for o in facets["color"]["options"] if o["checked"]]
        assert checked == ["black"]
        assert not facets["ram"]["expanded"]

    def test_filters_from_query_string(self, fixed_client: TestClient) -> None:
        """Address parameters filter the listing."""
        response = fixed_client.get(
            "/categories/mobiles/products?color=black&minPrice=0&maxPrice=10000"
        )
        data = response.json()
        assert [item["id"] for item in data["items"]] == ["p3"]
        assert data["filters"] == {"price": {"min": 0, "max": 10000}, "color": ["black"]}
        assert data["active_count"] == 2

    def test_in_stock(self, fixed_client: TestClient) -> None:
        """inStock=true drops stock-outs."""
        data = fixed_client.get("/categories/mobiles/products?inStock=true").json()
        assert [item["id"] for item in data["items"]] == ["p1", "p3"]
        assert all(item["in_stock"] for item in data["items"])
        assert data["query_string"] == "inStock=true"

    def test_sort_alias(self, fixed_client: TestClient) -> None:
        """Legacy sort aliases are understood."""
        data = fixed_client.get("/categories/mobiles/products?sort=price_desc").json()
        assert data["sort"] == "price-desc"
        assert [item["id"] for item in data["items"]] == ["p2", "p1", "p3"]

    def test_malformed_price_is_not_an_error(self, fixed_client: TestClient) -> None:
        """A broken bound degrades to the facet bound."""
        response = fixed_client.get("/categories/mobiles/products?minPrice=abc&maxPrice=3000")
        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == ["p3"]

    def test_empty_category(self, fixed_client: TestClient) -> None:
        """An unknown category is an empty listing, not an error."""
        data = fixed_client.get("/categories/furniture/products").json()
        assert data["status"] == "empty"
        assert data["total"] == 0
        assert data["facets"] == []

    def test_subcategory(self, fixed_client: TestClient) -> None:
        """subcategory narrows the scope."""
        data = fixed_client.get("/categories/mobiles/products?subcategory=feature-phones").json()
        assert data["total"] == 1

    def test_catalog_unavailable(self, fixed_client: TestClient) -> None:
        """Catalog failures map to 503 with the standard error body."""

        class Down:
            def items_for_category(self, category, subcategory=None):
                raise CatalogUnavailableError("down", category=category)

            def all_items(self):
                raise CatalogUnavailableError("down")

        app.dependency_overrides[get_source] = lambda: Down()
        response = fixed_client.get("/categories/mobiles/products")
        assert response.status_code == 503
        data = response.json()
        assert data["error_code"] == "CATALOG_UNAVAILABLE"
        assert data["request_id"] == response.headers["X-Request-ID"]


class TestSearch:
    """Tests for GET /search/products."""

    def test_search(self, fixed_client: TestClient) -> None:
        """Every token must match."""
        data = fixed_client.get("/search/products", params={"q": "red shirt"}).json()
        assert [item["id"] for item in data["items"]] == ["s1"]
        assert data["header"] == '1 Products for "red shirt"'
        assert data["query"] == "red shirt"

    def test_query_required(self, fixed_client: TestClient) -> None:
        """An empty query is rejected."""
        assert fixed_client.get("/search/products").status_code == 422


class TestFacets:
    """Tests for GET /categories/{category}/facets."""

    def test_facet_catalog(self, fixed_client: TestClient) -> None:
        """The facet catalog lists sections in display order."""
        data = fixed_client.get("/categories/mobiles/facets").json()
        assert data["category"] == "mobiles"
        ids = [f["id"] for f in data["facets"]]
        assert ids == ["price", "category", "rating", "color", "storage", "brand", "ram", "network"]
        storage = next(f for f in data["facets"] if f["id"] == "storage")
        assert [o["label"] for o in storage["options"]] == ["128 GB", "256 GB"]


class TestDemoCatalog:
    """Tests against the generated demo catalog."""

    def test_generated_category(self, client: TestClient) -> None:
        """The demo catalog serves every category."""
        data = client.get("/categories/laptops/products").json()
        assert data["total"] == 8
        assert data["page_size"] == 24
        assert data["facets"][0]["id"] == "price"
