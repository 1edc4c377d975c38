"""Products and customer engagement with them.

``in_stock`` never goes negative: every decrement is the guarded UPDATE in
``ProductRepository.decrement_stock``. ``total_sold``, ``total_revenue``
and ``view_count`` only ever grow and are only written with incremental
UPDATEs. ``average_rating`` and ``review_count`` are recomputed from the
rating records whenever a rating changes.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from freshcart.domain import freshcart
from freshcart.shared.clock import utcnow

EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "image_url",
    "images",
    "manufacturer",
    "manufacture_date",
    "expire_date",
    "nutritional_info",
    "available",
    "sku",
    "in_stock",
)


@freshcart.aggregate
class Product:
    name: String(required=True, max_length=200, unique=True)
    description: Text(default="")
    price: Float(required=True, min_value=0.0)
    category: String(required=True, max_length=100)
    image_url: String(max_length=500)
    images: Text(default="[]")  # JSON array of image URLs
    manufacturer: String(max_length=200)
    manufacture_date: String(max_length=30)
    expire_date: String(max_length=30)
    nutritional_info: Text()
    available: Boolean(default=True)
    sku: String(max_length=64)
    in_stock: Integer(default=0, min_value=0)

    total_sold: Integer(default=0)
    total_revenue: Float(default=0.0)
    view_count: Integer(default=0)
    average_rating: Float(default=0.0)
    review_count: Integer(default=0)

    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    @classmethod
    def create(cls, name, description, price, category, images=None, image_url=None, **details):
        images = list(images or [])
        now = utcnow()
        return cls(
            name=name,
            description=description,
            price=price,
            category=category,
            images=json.dumps(images),
            image_url=image_url or (images[0] if images else None),
            created_at=now,
            updated_at=now,
            **details,
        )

    @property
    def image_list(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    def revise(self, changes: dict) -> None:
        """Apply an admin edit. Counters are never part of an edit."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({"product": [f"Unknown product fields: {', '.join(sorted(unknown))}"]})

        for key, value in changes.items():
            if key == "images":
                value = json.dumps(list(value or []))
            setattr(self, key, value)
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<Product {self.name} stock={self.in_stock}>"


@freshcart.aggregate
class ProductRating:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    def change(self, rating: int) -> None:
        self.rating = rating
        self.updated_at = utcnow()


@freshcart.aggregate
class ProductFavorite:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    created_at: DateTime(default=utcnow)


@freshcart.aggregate
class ProductComment:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    comment: Text(required=True)
    created_at: DateTime(default=utcnow)


def rating_summary(ratings: list[int]) -> tuple[float, int]:
    """Average rounded to two decimals, and the number of ratings."""
    if not ratings:
        return 0.0, 0
    return round(sum(ratings) / len(ratings), 2), len(ratings)
