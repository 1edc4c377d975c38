"""Pydantic request/response schemas for the Catalogue API."""

import json
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from freshcart.shared.api import CamelModel, PaginationSchema


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CreateProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price: float = Field(gt=0)
    category: str = Field(min_length=1, max_length=100)
    manufacturer: str | None = None
    manufacture_date: str | None = None
    expire_date: str | None = None
    nutritional_info: str | None = None
    image_url: str | None = None
    images: list[str] = Field(default_factory=list)
    available: bool = True
    in_stock: int = Field(default=0, ge=0)
    sku: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Organic Bananas",
                    "description": "A bunch of six ripe bananas",
                    "price": 2.49,
                    "category": "fruit",
                    "manufacturer": "Green Farms",
                    "inStock": 40,
                }
            ]
        }
    }


class UpdateProductRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    category: str | None = None
    manufacturer: str | None = None
    manufacture_date: str | None = None
    expire_date: str | None = None
    nutritional_info: str | None = None
    image_url: str | None = None
    images: list[str] | None = None
    available: bool | None = None
    in_stock: int | None = Field(default=None, ge=0)
    sku: str | None = None


class RestockRequest(CamelModel):
    quantity: int = Field(ge=0)
    mode: Literal["set", "add"] = "set"


class RateRequest(CamelModel):
    rating: int = Field(ge=1, le=5)


class CommentRequest(CamelModel):
    comment: str = Field(min_length=1, max_length=1000)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class ProductSchema(CamelModel):
    id: str
    name: str
    description: str | None = ""
    price: float
    category: str
    image_url: str | None = None
    images: list[str] = Field(default_factory=list)
    manufacturer: str | None = None
    manufacture_date: str | None = None
    expire_date: str | None = None
    nutritional_info: str | None = None
    available: bool
    sku: str | None = None
    in_stock: int
    total_sold: int
    total_revenue: float
    view_count: int
    average_rating: float
    review_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("images", mode="before")
    @classmethod
    def decode_images(cls, value):
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value or []


class ProductListSchema(CamelModel):
    products: list[ProductSchema]
    pagination: PaginationSchema


class CommentAuthorSchema(CamelModel):
    id: str
    username: str
    image: str | None = None


class CommentSchema(CamelModel):
    id: str
    product_id: str
    comment: str
    created_at: datetime | None = None
    user: CommentAuthorSchema | None = None


class FavoriteSchema(CamelModel):
    product_id: str
    favorited: bool
