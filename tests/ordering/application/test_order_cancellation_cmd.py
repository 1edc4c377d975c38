import pytest
from freshcart.identity.user.principal import acting_as, principal_for
from freshcart.ordering.order.cancellation import CancelMyOrder
from freshcart.ordering.order.fulfillment import AssignDriver
from freshcart.ordering.order.order import OrderStatus
from freshcart.shared.errors import Forbidden, InvalidTransition, NotFound
from protean import current_domain


def _cancel(principal, order_id):
    return current_domain.process(CancelMyOrder(**acting_as(principal), order_id=order_id), asynchronous=False)


class TestCancelMyOrder:
    def test_cancel_restocks_every_line(self, customer, customer_principal, make_product, make_order, stock_of, reload):
        apple = make_product(in_stock=10)
        pear = make_product(in_stock=4)
        order = make_order(customer, (apple, 3), (pear, 4))
        assert (stock_of(apple), stock_of(pear)) == (7, 0)

        _cancel(customer_principal, order.id)

        cancelled = reload(order)
        assert cancelled.status == OrderStatus.CANCELLED.value
        assert cancelled.cancelled_at is not None
        assert (stock_of(apple), stock_of(pear)) == (10, 4)

    def test_second_cancel_is_rejected_and_does_not_restock_twice(
        self, customer, customer_principal, make_product, make_order, stock_of
    ):
        apple = make_product(in_stock=10)
        order = make_order(customer, (apple, 3))
        _cancel(customer_principal, order.id)

        with pytest.raises(InvalidTransition, match="cannot be cancelled"):
            _cancel(customer_principal, order.id)
        assert stock_of(apple) == 10

    def test_shipped_order_cannot_be_cancelled(
        self, customer, customer_principal, admin_principal, driver, make_product, make_order, stock_of
    ):
        apple = make_product(in_stock=10)
        order = make_order(customer, (apple, 2))
        current_domain.process(
            AssignDriver(**acting_as(admin_principal), order_id=order.id, driver_id=driver.id), asynchronous=False
        )

        with pytest.raises(InvalidTransition):
            _cancel(customer_principal, order.id)
        assert stock_of(apple) == 8

    def test_only_the_owner_can_cancel(self, customer, make_user, make_product, make_order, reload):
        order = make_order(customer, (make_product(), 1))
        stranger = principal_for(make_user())

        with pytest.raises(Forbidden, match="You cannot cancel this order"):
            _cancel(stranger, order.id)
        assert reload(order).status == OrderStatus.PENDING.value

    def test_admin_uses_the_status_endpoint_instead(self, customer, admin_principal, make_product, make_order):
        order = make_order(customer, (make_product(), 1))
        with pytest.raises(Forbidden):
            _cancel(admin_principal, order.id)

    def test_unknown_order(self, customer_principal):
        with pytest.raises(NotFound, match="Order not found"):
            _cancel(customer_principal, "missing")

    def test_customer_cancel_sends_no_notification(self, customer, customer_principal, make_product, make_order, push):
        order = make_order(customer, (make_product(), 1))
        _cancel(customer_principal, order.id)
        assert push.sent_pushes == []
