"""Response schemas for the admin analytics API."""

from freshcart.shared.api import CamelModel


class KpisSchema(CamelModel):
    revenue: float
    orders: int
    avg_order_value: float
    customers: int


class EarningsPointSchema(CamelModel):
    period: str
    value: float


class TopProductSchema(CamelModel):
    product_id: str
    name: str
    quantity: int
    revenue: float


class TopDriverSchema(CamelModel):
    driver_id: str
    username: str
    assigned: int
    delivered: int
    delivery_rate: float


class ViewedProductSchema(CamelModel):
    id: str
    name: str
    category: str
    view_count: int
