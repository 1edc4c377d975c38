from datetime import UTC, datetime, timedelta

import pytest
from freshcart.analytics import kpis as analytics
from freshcart.catalogue.product.engagement import RecordView
from freshcart.identity.user.principal import acting_as
from freshcart.ordering.order.fulfillment import AdminUpdateStatus, AssignDriver, DriverUpdateStatus
from freshcart.shared.errors import Forbidden, ValidationFailed
from protean import current_domain


def _as(principal, command_cls, **fields):
    return current_domain.process(command_cls(**acting_as(principal), **fields), asynchronous=False)


@pytest.fixture
def sales(customer, make_user, driver, driver_principal, admin_principal, make_product, make_order):
    """Three live orders from two customers plus one cancelled order.

    Revenue: 2 x 100 + 1 x 30 + 3 x 30 = 320 (shipping fees and the cancelled order excluded).
    """
    apple = make_product(name="Apple", price=100.0, category="Fruits", in_stock=50)
    milk = make_product(name="Milk", price=30.0, category="Dairy", in_stock=50)
    other = make_user()

    delivered = make_order(customer, (apple, 2), (milk, 1), shipping_fee=5.0)
    make_order(other, (milk, 3))
    cancelled = make_order(other, (apple, 4))
    _as(admin_principal, AdminUpdateStatus, order_id=cancelled.id, status="cancelled")

    _as(admin_principal, AssignDriver, order_id=delivered.id, driver_id=driver.id)
    _as(driver_principal, DriverUpdateStatus, order_id=delivered.id, status="delivered")
    return {"apple": apple, "milk": milk}


class TestDateRange:
    def test_defaults_to_the_last_week(self):
        range_ = analytics.DateRange.of()
        assert range_.end - range_.start == timedelta(days=7)

    def test_naive_datetimes_are_utc(self):
        range_ = analytics.DateRange.of(datetime(2024, 1, 1), datetime(2024, 1, 31))
        assert range_.start.tzinfo == UTC

    def test_start_after_end(self):
        with pytest.raises(ValidationFailed):
            analytics.DateRange.of(datetime(2024, 2, 1), datetime(2024, 1, 1))


class TestKpis:
    def test_revenue_orders_and_customers(self, admin_principal, sales):
        result = analytics.kpis(admin_principal, analytics.DateRange.of())

        assert result.revenue == 320.0
        assert result.orders == 2
        assert result.avg_order_value == 160.0
        assert result.customers == 2

    def test_empty_range(self, admin_principal, sales):
        last_year = analytics.DateRange.of(datetime(2020, 1, 1), datetime(2020, 1, 31))
        assert analytics.kpis(admin_principal, last_year) == analytics.Kpis(
            revenue=0.0, orders=0, avg_order_value=0.0, customers=0
        )

    def test_admin_only(self, customer_principal):
        with pytest.raises(Forbidden):
            analytics.kpis(customer_principal, analytics.DateRange.of())


class TestBreakdowns:
    def test_daily_earnings(self, admin_principal, sales):
        [point] = analytics.earnings(admin_principal, analytics.DateRange.of(), "daily")
        assert point.value == 320.0

    def test_unknown_group(self, admin_principal):
        with pytest.raises(ValidationFailed, match="daily, weekly, monthly"):
            analytics.earnings(admin_principal, analytics.DateRange.of(), "hourly")

    def test_category_share(self, admin_principal, sales):
        shares = {p.period: p.value for p in analytics.category_share(admin_principal, analytics.DateRange.of())}
        assert shares == {"Fruits": 62.5, "Dairy": 37.5}

    def test_top_products(self, admin_principal, sales):
        top = analytics.top_products(admin_principal, analytics.DateRange.of())
        assert [(p.name, p.quantity, p.revenue) for p in top] == [("Apple", 2, 200.0), ("Milk", 4, 120.0)]

    def test_top_drivers(self, admin_principal, driver, sales):
        [top] = analytics.top_drivers(admin_principal, analytics.DateRange.of())
        assert (top.driver_id, top.assigned, top.delivered, top.delivery_rate) == (driver.id, 1, 1, 100.0)

    def test_top_viewed(self, admin_principal, sales):
        current_domain.process(RecordView(product_id=sales["milk"].id), asynchronous=False)
        assert analytics.top_viewed_products(admin_principal, limit=1)[0].name == "Milk"
