"""Admin analytics over orders in a date range.

Revenue is counted from order lines (price × quantity) and excludes
cancelled orders. Orders are loaded once per call and aggregated in
Python, so the same code runs on SQLite and PostgreSQL.
"""

from collections import OrderedDict, defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta

from protean.utils.globals import current_domain

from freshcart.catalogue.product import queries as catalogue
from freshcart.catalogue.product.product import Product
from freshcart.identity.user.principal import Principal, require_admin
from freshcart.identity.user.user import User
from freshcart.ordering.order.order import Order, OrderStatus
from freshcart.shared.clock import as_utc, utcnow
from freshcart.shared.errors import ValidationFailed

DEFAULT_RANGE_DAYS = 7
EARNINGS_GROUPS = ("daily", "weekly", "monthly")


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    @classmethod
    def of(cls, start: datetime | None = None, end: datetime | None = None) -> "DateRange":
        end = as_utc(end) if end else utcnow()
        start = as_utc(start) if start else end - timedelta(days=DEFAULT_RANGE_DAYS)
        if start > end:
            raise ValidationFailed("Range start must be before its end")
        return cls(start=start, end=end)

    def __contains__(self, value: datetime) -> bool:
        return self.start <= as_utc(value) <= self.end


@dataclass(frozen=True)
class Kpis:
    revenue: float
    orders: int
    avg_order_value: float
    customers: int


@dataclass(frozen=True)
class EarningsPoint:
    period: str
    value: float


@dataclass(frozen=True)
class TopProduct:
    product_id: str
    name: str
    quantity: int
    revenue: float


@dataclass(frozen=True)
class TopDriver:
    driver_id: str
    username: str
    assigned: int
    delivered: int
    delivery_rate: float


def _orders_in(range_: DateRange, include_cancelled: bool = False) -> list[Order]:
    orders = current_domain.repository_for(Order).all_orders()
    return [
        order
        for order in orders
        if order.created_at in range_ and (include_cancelled or order.status != OrderStatus.CANCELLED.value)
    ]


def _revenue(order: Order) -> float:
    return sum(line.price * line.quantity for line in order.items)


def kpis(principal: Principal, range_: DateRange) -> Kpis:
    require_admin(principal)
    orders = _orders_in(range_)
    revenue = round(sum(_revenue(order) for order in orders), 2)
    return Kpis(
        revenue=revenue,
        orders=len(orders),
        avg_order_value=round(revenue / len(orders), 2) if orders else 0.0,
        customers=len({str(order.user_id) for order in orders}),
    )


def _bucket(created_at: datetime, group: str) -> str:
    match group:
        case "monthly":
            return f"{created_at.year:04d}-{created_at.month:02d}"
        case "weekly":
            year, week, _ = created_at.isocalendar()
            return f"{year:04d}-W{week:02d}"
        case _:
            return created_at.date().isoformat()


def earnings(principal: Principal, range_: DateRange, group: str = "daily") -> list[EarningsPoint]:
    require_admin(principal)
    if group not in EARNINGS_GROUPS:
        raise ValidationFailed(f"Group must be one of: {', '.join(EARNINGS_GROUPS)}")

    buckets: OrderedDict[str, float] = OrderedDict()
    for order in _orders_in(range_):
        key = _bucket(as_utc(order.created_at), group)
        buckets[key] = buckets.get(key, 0.0) + _revenue(order)
    return [EarningsPoint(period=key, value=round(value, 2)) for key, value in buckets.items()]


def category_share(principal: Principal, range_: DateRange) -> list[EarningsPoint]:
    """Each category's share of revenue, in percent."""
    require_admin(principal)
    products = current_domain.repository_for(Product)
    categories: dict[str, str | None] = {}
    revenue: defaultdict[str, float] = defaultdict(float)

    for order in _orders_in(range_):
        for line in order.items:
            product_id = str(line.product_id)
            if product_id not in categories:
                product = products.find(product_id)
                categories[product_id] = product.category if product else None
            # Lines of deleted products have no category to count towards
            if categories[product_id] is not None:
                revenue[categories[product_id]] += line.price * line.quantity

    total = sum(revenue.values()) or 1.0
    ranked = sorted(revenue.items(), key=lambda item: -item[1])
    return [EarningsPoint(period=category, value=round(value / total * 100, 2)) for category, value in ranked]


def top_products(principal: Principal, range_: DateRange, limit: int = 10) -> list[TopProduct]:
    require_admin(principal)
    totals: dict[str, dict] = {}
    for order in _orders_in(range_):
        for line in order.items:
            entry = totals.setdefault(str(line.product_id), {"name": line.name, "quantity": 0, "revenue": 0.0})
            entry["quantity"] += line.quantity
            entry["revenue"] += line.price * line.quantity

    ranked = sorted(totals.items(), key=lambda item: -item[1]["revenue"])[:limit]
    return [
        TopProduct(product_id=product_id, name=entry["name"], quantity=entry["quantity"], revenue=round(entry["revenue"], 2))
        for product_id, entry in ranked
    ]


def top_drivers(principal: Principal, range_: DateRange, limit: int = 10) -> list[TopDriver]:
    require_admin(principal)
    counts: dict[str, list[int]] = {}
    for order in _orders_in(range_, include_cancelled=True):
        if not order.driver_id:
            continue
        assigned_delivered = counts.setdefault(str(order.driver_id), [0, 0])
        assigned_delivered[0] += 1
        if order.status == OrderStatus.DELIVERED.value:
            assigned_delivered[1] += 1

    users = current_domain.repository_for(User)
    drivers = []
    for driver_id, (assigned, delivered) in counts.items():
        user = users.find(driver_id)
        if user is None:
            continue
        drivers.append(
            TopDriver(
                driver_id=driver_id,
                username=user.username,
                assigned=assigned,
                delivered=delivered,
                delivery_rate=round(delivered / assigned * 100, 2),
            )
        )
    return sorted(drivers, key=lambda d: (-d.delivered, d.driver_id))[:limit]


def top_viewed_products(principal: Principal, limit: int = 10) -> list[Product]:
    require_admin(principal)
    return catalogue.popular_products(limit)
