"""Catalog item model.

Items are delivered by the catalog data source and are read-only inside
the filtering core. Records coming from the data source are loosely
typed (numbers may arrive as strings, brand may be null), so parsing
degrades to safe defaults instead of failing.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Self

AttributeValue = str | int | float | bool

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Brand:
    """Brand reference attached to an item."""

    id: str
    name: str


@dataclass(frozen=True)
class Item:
    """Sellable catalog item (one default variant of a product).

    Attributes:
        id: Variant identifier.
        product_id: Parent product identifier.
        name: Full display name.
        slug: URL slug.
        description: Long description.
        category: Category slug.
        subcategory: Subcategory slug.
        brand: Brand reference, if any.
        color: Color variant.
        storage: Storage variant (e.g. "256 GB").
        our_price: Current selling price.
        mrp: List price.
        average_rating: Average star rating (0.0-5.0).
        stock: Units in stock.
        created_at: Creation timestamp.
        attributes: Free-form extra attributes.
        tags: Merchandising tags.
        image_url: Primary image URL.
    """

    id: str
    name: str
    category: str = ""
    subcategory: str = ""
    product_id: str = ""
    slug: str = ""
    description: str = ""
    brand: Brand | None = None
    color: str = ""
    storage: str = ""
    our_price: float = 0
    mrp: float = 0
    average_rating: float = 0
    stock: int = 0
    created_at: datetime = _EPOCH
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    image_url: str | None = None

    @property
    def brand_name(self) -> str:
        """Get brand name or empty string."""
        return self.brand.name if self.brand else ""

    @property
    def in_stock(self) -> bool:
        """Check if at least one unit is available."""
        return self.stock > 0

    @property
    def discount_percent(self) -> int:
        """Get discount off list price, rounded down."""
        if self.mrp <= 0 or self.our_price >= self.mrp:
            return 0
        return int((self.mrp - self.our_price) * 100 // self.mrp)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Self:
        """Parse a catalog data source record.

        Accepts both camelCase keys (ourPrice, averageRating) and
        snake_case keys (our_price, average_rating).

        Args:
            record: Raw record.

        Returns:
            Parsed item.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                value = record.get(key)
                if value is not None:
                    return value
            return default

        brand_raw = pick("brand")
        brand: Brand | None = None
        if isinstance(brand_raw, Mapping) and brand_raw.get("name"):
            brand = Brand(id=str(brand_raw.get("id", "")), name=str(brand_raw["name"]))
        elif isinstance(brand_raw, str) and brand_raw.strip():
            brand = Brand(id="", name=brand_raw)
        elif pick("brand_name", "brandName"):
            brand = Brand(
                id=str(pick("brand_id", "brandId", default="")),
                name=str(pick("brand_name", "brandName")),
            )

        attributes = pick("attributes", default={})
        if not isinstance(attributes, Mapping):
            attributes = {}

        tags = pick("tags", default=())
        if isinstance(tags, str):
            tags = [tags]

        return cls(
            id=str(pick("variantId", "variant_id", "id", default="")),
            product_id=str(pick("productId", "product_id", "id", default="")),
            name=str(pick("name", "full_name", "fullName", default="")),
            slug=str(pick("slug", default="")),
            description=str(pick("description", default="")),
            category=str(pick("category", default="")),
            subcategory=str(pick("subcategory", default="")),
            brand=brand,
            color=str(pick("color", default=attributes.get("color", ""))),
            storage=str(pick("storage", default=attributes.get("storage", ""))),
            our_price=_to_number(pick("ourPrice", "our_price", "price")),
            mrp=_to_number(pick("mrp")),
            average_rating=_to_number(pick("averageRating", "average_rating", "rating")),
            stock=int(_to_number(pick("totalStocks", "stock", "stock_quantity"))),
            created_at=_to_datetime(pick("createdAt", "created_at")),
            attributes={
                str(k): v
                for k, v in attributes.items()
                if isinstance(v, (str, int, float, bool))
            },
            tags=tuple(str(t) for t in tags if str(t).strip()),
            image_url=pick("image", "image_url", "imageUrl"),
        )


def _to_number(value: Any) -> float:
    """Parse a loosely typed number; anything unparseable becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def _to_datetime(value: Any) -> datetime:
    """Parse an ISO timestamp; anything unparseable becomes the epoch."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
