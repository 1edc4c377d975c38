"""Ordering events -> notifications, handled by the notification event handlers."""

import pytest
from freshcart.identity.user.principal import acting_as
from freshcart.notifications.notification.inbox import my_notifications
from freshcart.notifications.notification.notification import NotificationType
from freshcart.ordering.order.events import DriverAssigned, OrderStatusChanged
from freshcart.ordering.order.fulfillment import AdminUpdateStatus, AssignDriver, DriverUpdateStatus
from freshcart.shared.pagination import PageRequest
from protean import current_domain


def _notifications_for(user):
    page = my_notifications(str(user.id), PageRequest.of(size="all"))
    return sorted(page.items, key=lambda n: n.created_at)


def _as(principal, command_cls, **fields):
    return current_domain.process(command_cls(**acting_as(principal), **fields), asynchronous=False)


@pytest.fixture
def order(customer, make_product, make_order):
    return make_order(customer, (make_product(in_stock=10), 1))


class TestDriverAssignedNotifications:
    def test_driver_and_customer_are_notified(self, order, customer, driver, admin, admin_principal, push):
        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)

        [to_driver, *_] = _notifications_for(driver)
        assert to_driver.title == "New Order Assigned"
        assert to_driver.type == NotificationType.DRIVER_ASSIGNED.value
        assert to_driver.sender_id == admin.id
        assert to_driver.payload["orderId"] == order.id
        assert to_driver.source_event_type == DriverAssigned.__type__

        titles = {n.title for n in _notifications_for(customer)}
        assert "Driver Assigned" in titles
        assigned = next(n for n in _notifications_for(customer) if n.title == "Driver Assigned")
        assert driver.username in assigned.message
        assert assigned.payload["driverId"] == driver.id

        assert {p["room"] for p in push.sent_pushes} == {f"user:{driver.id}", f"user:{customer.id}"}

    def test_reassigning_the_same_driver_notifies_nobody_again(self, order, driver, admin_principal):
        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)
        before = len(_notifications_for(driver))

        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)

        assert len(_notifications_for(driver)) == before


class TestStatusChangeNotifications:
    def test_assignment_also_announces_shipping(self, order, customer, driver, admin_principal):
        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)

        assert {n.title for n in _notifications_for(customer)} == {"Driver Assigned", "Order Shipped"}
        shipped = next(n for n in _notifications_for(customer) if n.title == "Order Shipped")
        assert shipped.source_event_type == OrderStatusChanged.__type__

    def test_delivery_notifies_customer_and_driver(self, order, customer, driver, admin_principal, driver_principal):
        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)
        _as(driver_principal, DriverUpdateStatus, order_id=order.id, status="delivered")

        customer_titles = {n.title for n in _notifications_for(customer)}
        driver_titles = {n.title for n in _notifications_for(driver)}
        assert "Order Delivered" in customer_titles
        assert "Delivered" in driver_titles

        delivered = next(n for n in _notifications_for(customer) if n.title == "Order Delivered")
        assert delivered.type == NotificationType.ORDER_DELIVERED.value
        assert delivered.sender_role == "driver"

    def test_admin_cancel_notifies_customer(self, order, customer, admin_principal):
        _as(admin_principal, AdminUpdateStatus, order_id=order.id, status="cancelled")

        [notification] = _notifications_for(customer)
        assert notification.title == "Order Cancelled"
        assert notification.type == NotificationType.SYSTEM.value

    def test_payment_update_is_not_notified(self, order, customer, admin_principal):
        _as(admin_principal, AdminUpdateStatus, order_id=order.id, status="pending", payment_status="paid")
        assert _notifications_for(customer) == []


class TestPushDelivery:
    def test_push_failure_keeps_the_notification(self, order, customer, driver, admin_principal, push):
        push.configure(should_succeed=False)

        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)

        assert len(_notifications_for(customer)) == 2
        assert push.sent_pushes == []

    def test_every_notification_is_pushed_once(self, order, customer, driver, admin_principal, push):
        _as(admin_principal, AssignDriver, order_id=order.id, driver_id=driver.id)

        assert len(push.sent_to(str(customer.id))) == len(_notifications_for(customer))
        assert len(push.sent_to(str(driver.id))) == len(_notifications_for(driver))
