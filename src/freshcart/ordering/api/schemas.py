"""Pydantic request/response schemas for the Ordering API.

These are external contracts, separate from the internal commands.
"""

from datetime import datetime

from pydantic import Field

from freshcart.shared.api import CamelModel, PaginationSchema


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(CamelModel):
    user_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    address1: str | None = Field(default=None, max_length=255)
    address2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)


class CartProductSchema(CamelModel):
    id: str
    name: str
    price: float
    image_url: str | None = None
    in_stock: int
    available: bool


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(CamelModel):
    quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(CamelModel):
    shipping_fee: float = Field(ge=0, default=0)
    shipping_address: ShippingAddressSchema | None = None
    notes: str | None = Field(default=None, max_length=500)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shippingFee": 5,
                    "shippingAddress": {
                        "userName": "Jane Doe",
                        "phone": "+1 555 0100",
                        "address1": "1 Main St",
                        "city": "Springfield",
                        "zip": "12345",
                        "country": "US",
                    },
                    "notes": "Leave at the door",
                }
            ]
        }
    }


class AssignDriverRequest(CamelModel):
    driver_id: str


class DriverStatusRequest(CamelModel):
    status: str


class AdminStatusRequest(CamelModel):
    status: str
    payment_status: str | None = None
    driver_id: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartLineSchema(CamelModel):
    product_id: str
    quantity: int
    product: CartProductSchema | None = None


class CartSchema(CamelModel):
    id: str
    user_id: str
    items: list[CartLineSchema]
    item_count: int
    subtotal: float


class OrderLineSchema(CamelModel):
    product_id: str
    name: str
    price: float
    image: str | None = None
    quantity: int
    line_total: float


class OrderSchema(CamelModel):
    id: str
    user_id: str
    driver_id: str | None = None
    status: str
    payment_status: str
    items: list[OrderLineSchema]
    subtotal: float
    shipping_fee: float
    total: float
    shipping_address: ShippingAddressSchema | None = None
    notes: str | None = None
    assigned_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListSchema(CamelModel):
    orders: list[OrderSchema]
    pagination: PaginationSchema
