"""Demo catalog generator with deterministic seeding.

Generates a realistic electronics/apparel catalog (colors, storage
variants, dynamic attributes, stock-outs) so the listing service can run
without the real catalog data source. Uses seeded random for
reproducibility.
"""

import hashlib
import random
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

from facetbrowse.catalog.models import Brand, Item


# ============================================================================
# Constants
# ============================================================================

BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
    "Globex",
    "Initech",
    "Umbrella",
]

ADJECTIVES = [
    "Prime", "Ultra", "Max", "Plus", "Classic", "Neo",
    "Pro", "Lite", "Edge", "Nova", "Titan", "Apex",
]

COLORS = ["Black", "White", "Blue", "Red", "Green", "Space Grey", "Silver"]

# Catalog epoch; created_at timestamps are spread over the preceding year
CATALOG_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)

# Category definitions: price range (rupees), storage and attribute pools
CATEGORIES: list[dict[str, Any]] = [
    {
        "slug": "mobiles",
        "subcategories": ["smartphones", "feature-phones"],
        "price_range": (4999, 129999),
        "templates": ["{brand} {adj} 5G", "{brand} Phone {adj}"],
        "storage": ["64GB", "128GB", "256GB", "512GB", "1TB"],
        "attributes": {
            "ram": ["4GB", "6GB", "8GB", "12GB"],
            "screenSize": ["6.1 inch", "6.5 inch", "6.7 inch"],
            "network": ["4G", "5G"],
        },
        "tags": ["smartphone", "android", "dual sim"],
    },
    {
        "slug": "laptops",
        "subcategories": ["ultrabooks", "gaming-laptops"],
        "price_range": (29999, 249999),
        "templates": ["{brand} {adj}Book 14", "{brand} {adj} Gaming 16"],
        "storage": ["256GB", "512GB", "1TB", "2TB"],
        "attributes": {
            "ram": ["8GB", "16GB", "32GB"],
            "processor": ["Core i5", "Core i7", "Ryzen 5", "Ryzen 7"],
        },
        "tags": ["laptop", "notebook", "work from home"],
    },
    {
        "slug": "televisions",
        "subcategories": ["smart-tv", "oled-tv"],
        "price_range": (12999, 299999),
        "templates": ["{brand} {adj} Smart TV", "{brand} Vision {adj}"],
        "storage": [],
        "attributes": {
            "panel": ["LED", "QLED", "OLED"],
            "resolution": ["Full HD", "4K Ultra HD", "8K"],
            "screenSize": ["43 inch", "55 inch", "65 inch"],
        },
        "tags": ["tv", "home entertainment"],
    },
    {
        "slug": "headphones",
        "subcategories": ["earbuds", "over-ear"],
        "price_range": (499, 34999),
        "templates": ["{brand} {adj} Buds", "{brand} Over-Ear {adj}"],
        "storage": [],
        "attributes": {
            "type": ["In-Ear", "Over-Ear", "On-Ear"],
            "wireless": [True, False],
        },
        "tags": ["audio", "music", "bluetooth"],
    },
    {
        "slug": "apparel",
        "subcategories": ["t-shirts", "hoodies"],
        "price_range": (299, 3999),
        "templates": ["{brand} {adj} Cotton Shirt", "{brand} {adj} Hoodie"],
        "storage": [],
        "attributes": {
            "size": ["S", "M", "L", "XL"],
            "fabric": ["Cotton", "Polyester", "Linen"],
        },
        "tags": ["clothing", "casual"],
    },
]


def _slugify(text: str) -> str:
    """Lower-case text and join alphanumeric runs with hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_category: Number of items per category.
        out_of_stock_ratio: Share of items generated with zero stock.
    """

    seed: int = 42
    products_per_category: int = 8
    out_of_stock_ratio: float = 0.1

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small catalog (~20 items)."""
        return cls(seed=42, products_per_category=4)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for a full catalog (~150 items)."""
        return cls(seed=42, products_per_category=30)


# ============================================================================
# Catalog Generator
# ============================================================================


class CatalogGenerator:
    """Generates catalog items with deterministic seeding.

    Example usage:
        generator = CatalogGenerator(GeneratorConfig.small())
        for item in generator.generate():
            print(item.name)
    """

    def __init__(self, config: GeneratorConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config

    def _deterministic_seed(self, *args: str | int) -> int:
        """Create deterministic seed from arguments."""
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _generate_id(self, *parts: str | int) -> str:
        """Generate deterministic identifier."""
        data = ":".join(str(p) for p in (self.config.seed, *parts))
        return hashlib.md5(data.encode()).hexdigest()[:16]

    def _generate_item(self, category: dict[str, Any], index: int) -> Item:
        """Generate a single item.

        Args:
            category: Category definition.
            index: Item index within category.

        Returns:
            Generated Item.
        """
        rng = random.Random(
            self._deterministic_seed(self.config.seed, category["slug"], index)
        )

        brand = rng.choice(BRANDS)
        adj = rng.choice(ADJECTIVES)
        name = rng.choice(category["templates"]).format(brand=brand, adj=adj)
        color = rng.choice(COLORS)
        storage = rng.choice(category["storage"]) if category["storage"] else ""

        attributes = {
            key: rng.choice(values) for key, values in category["attributes"].items()
        }

        # Prices end in 9, list price 5-40% above selling price
        min_price, max_price = category["price_range"]
        our_price = (rng.randint(min_price, max_price) // 10) * 10 + 9
        mrp = (int(our_price * rng.uniform(1.05, 1.4)) // 10) * 10 + 9

        rating = round(rng.uniform(1.0, 5.0), 1)
        in_stock = rng.random() >= self.config.out_of_stock_ratio
        stock = rng.randint(1, 150) if in_stock else 0

        full_name = f"{name} ({color}{', ' + storage if storage else ''})"
        product_id = self._generate_id(category["slug"], index)

        return Item(
            id=self._generate_id(category["slug"], index, color, storage),
            product_id=product_id,
            name=full_name,
            slug=_slugify(full_name),
            description=f"{name} from {brand}. Part of our {adj.lower()} range of "
            f"{category['slug'].replace('-', ' ')}.",
            category=category["slug"],
            subcategory=rng.choice(category["subcategories"]),
            brand=Brand(id=self._generate_id("brand", brand), name=brand),
            color=color,
            storage=storage,
            our_price=our_price,
            mrp=mrp,
            average_rating=rating,
            stock=stock,
            created_at=CATALOG_EPOCH - timedelta(days=rng.randint(0, 364)),
            attributes=attributes,
            tags=tuple(category["tags"]),
            image_url=f"https://picsum.photos/seed/{product_id[:8]}/400/400",
        )

    def generate(self) -> Iterator[Item]:
        """Generate all items.

        Yields:
            Generated Item instances.
        """
        for category in CATEGORIES:
            for i in range(self.config.products_per_category):
                yield self._generate_item(category, i)

    def generate_list(self) -> list[Item]:
        """Generate all items as a list."""
        return list(self.generate())

    @property
    def expected_count(self) -> int:
        """Get expected number of items."""
        return len(CATEGORIES) * self.config.products_per_category
