import pytest
from freshcart.identity.user.principal import acting_as
from freshcart.ordering.order.fulfillment import AssignDriver, DriverUpdateStatus
from protean import current_domain


@pytest.fixture()
def sales(customer, driver, admin_principal, driver_principal, make_product, make_order):
    apple = make_product(name="Apple", price=100.0, category="Fruits")
    milk = make_product(name="Milk", price=30.0, category="Dairy")
    order = make_order(customer, (apple, 1), (milk, 1))
    current_domain.process(
        AssignDriver(**acting_as(admin_principal), order_id=order.id, driver_id=driver.id), asynchronous=False
    )
    current_domain.process(
        DriverUpdateStatus(**acting_as(driver_principal), order_id=order.id, status="delivered"), asynchronous=False
    )
    return order


@pytest.fixture()
def admin_headers(admin, auth_headers):
    return auth_headers(admin)


class TestAnalyticsEndpoints:
    def test_kpis(self, client, admin_headers, sales):
        response = client.get("/api/admin/analytics/kpis", headers=admin_headers)

        assert response.json()["data"] == {"revenue": 130.0, "orders": 1, "avgOrderValue": 130.0, "customers": 1}

    def test_customers_are_forbidden(self, client, customer, auth_headers):
        assert client.get("/api/admin/analytics/kpis", headers=auth_headers(customer)).status_code == 403

    def test_explicit_range_outside_the_sales(self, client, admin_headers, sales):
        response = client.get(
            "/api/admin/analytics/kpis",
            params={"from": "2020-01-01T00:00:00", "to": "2020-02-01T00:00:00"},
            headers=admin_headers,
        )
        assert response.json()["data"]["orders"] == 0

    def test_inverted_range(self, client, admin_headers):
        response = client.get(
            "/api/admin/analytics/kpis",
            params={"from": "2024-02-01T00:00:00", "to": "2024-01-01T00:00:00"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_monthly_earnings(self, client, admin_headers, sales):
        response = client.get("/api/admin/analytics/earnings", params={"group": "monthly"}, headers=admin_headers)

        [point] = response.json()["data"]
        assert point["value"] == 130.0

    def test_unknown_grouping(self, client, admin_headers):
        response = client.get("/api/admin/analytics/earnings", params={"group": "hourly"}, headers=admin_headers)
        assert response.status_code == 400

    def test_category_share(self, client, admin_headers, sales):
        data = client.get("/api/admin/analytics/category-share", headers=admin_headers).json()["data"]
        assert {p["period"]: p["value"] for p in data} == pytest.approx({"Fruits": 76.92, "Dairy": 23.08}, abs=0.01)

    def test_top_products(self, client, admin_headers, sales):
        data = client.get("/api/admin/analytics/top-products", params={"limit": 1}, headers=admin_headers).json()["data"]
        assert [(p["name"], p["revenue"]) for p in data] == [("Apple", 100.0)]

    def test_drivers(self, client, admin_headers, driver, sales):
        [row] = client.get("/api/admin/analytics/drivers", headers=admin_headers).json()["data"]
        assert row == {
            "driverId": driver.id,
            "username": driver.username,
            "assigned": 1,
            "delivered": 1,
            "deliveryRate": 100.0,
        }

    def test_top_viewed(self, client, admin_headers, make_product):
        popular = make_product(name="Popular")
        make_product(name="Ignored")
        client.patch(f"/api/products/{popular.id}/view")

        data = client.get("/api/admin/analytics/top-viewed", params={"limit": 1}, headers=admin_headers).json()["data"]
        assert data == [{"id": popular.id, "name": "Popular", "category": "Fruits", "viewCount": 1}]
