"""Fulfillment: driver assignment and status changes after checkout.

Admins assign drivers and may move an order through any legal transition.
Drivers may only move orders assigned to them, and only to shipped or
delivered. Delivery credits every line's quantity and revenue to its
product in the same unit of work as the status change; the status claim
guarantees that happens once.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from freshcart.catalogue.product.product import Product
from freshcart.domain import freshcart
from freshcart.identity.user.principal import Admin, Customer, Driver, principal_from, require_admin, unreachable
from freshcart.identity.user.repository import load_user
from freshcart.ordering.order.cancellation import restock_lines
from freshcart.ordering.order.order import Order, OrderStatus, PaymentStatus, check_payment_status
from freshcart.ordering.order.repository import load_order
from freshcart.shared.errors import Forbidden, InvalidTransition, ValidationFailed

logger = structlog.get_logger(__name__)

DRIVER_SETTABLE = (OrderStatus.SHIPPED, OrderStatus.DELIVERED)


@freshcart.command(part_of="Order")
class AssignDriver:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)


@freshcart.command(part_of="Order")
class DriverUpdateStatus:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@freshcart.command(part_of="Order")
class AdminUpdateStatus:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    payment_status = String(max_length=20)
    driver_id = Identifier()


def _parse_status(order: Order, value: str) -> OrderStatus:
    if value == PaymentStatus.PAID.value:
        # Payment is not a stage of the order lifecycle
        raise InvalidTransition(f"Cannot transition from {order.status} to {value}, set the payment status instead")
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationFailed(f"Invalid order status {value!r}") from None


def _parse_payment_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationFailed(f"Invalid payment status {value!r}") from None


def _check_driver(driver_id) -> None:
    if not load_user(str(driver_id)).is_driver:
        raise ValidationFailed("Selected user is not a driver")


def _credit_sales(order: Order) -> None:
    products = current_domain.repository_for(Product)
    for line in order.items:
        if not products.record_sale(str(line.product_id), line.quantity, line.line_total):
            logger.warning(
                "sale_not_credited_missing_product",
                order_id=str(order.id),
                product_id=str(line.product_id),
            )


def _save(order: Order, previous: str) -> None:
    repo = current_domain.repository_for(Order)
    repo.claim_status(str(order.id), previous, order.status)
    repo.add(order)


@freshcart.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(AssignDriver)
    def assign_driver(self, command):
        """Assign a driver and move the order to shipped."""
        admin = require_admin(principal_from(command.actor_id, command.actor_role))

        order = load_order(command.order_id)
        _check_driver(command.driver_id)

        previous = order.status
        order.assign_driver(str(command.driver_id), assigned_by=admin.user_id)
        _save(order, previous)

        logger.info(
            "driver_assigned",
            order_id=str(order.id),
            driver_id=str(order.driver_id),
            assigned_by=admin.user_id,
        )
        return str(order.id)

    @handle(DriverUpdateStatus)
    def driver_update_status(self, command):
        principal = principal_from(command.actor_id, command.actor_role)
        match principal:
            case Driver():
                driver = principal
            case Customer() | Admin():
                raise Forbidden("Forbidden not driver")
            case _:
                unreachable(principal)

        try:
            target = OrderStatus(command.status)
        except ValueError:
            target = None
        if target not in DRIVER_SETTABLE:
            raise ValidationFailed("Driver can only set status to shipped or delivered")

        order = load_order(command.order_id)
        if str(order.driver_id or "") != driver.user_id:
            raise Forbidden("This order is not assigned to you")
        if order.is_terminal:
            raise InvalidTransition(f"Cannot update order when status is {order.status}")

        previous = order.status
        if target == OrderStatus.DELIVERED:
            order.mark_delivered(driver.user_id, command.actor_role)
        else:
            order.mark_shipped(driver.user_id, command.actor_role)
        _save(order, previous)

        if target == OrderStatus.DELIVERED:
            _credit_sales(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous,
            status=order.status,
            driver_id=driver.user_id,
        )
        return str(order.id)

    @handle(AdminUpdateStatus)
    def admin_update_status(self, command):
        """Administrative status change, following the same transition rules.

        A supplied ``driver_id`` is (re)assigned before the transition is
        applied, and shipping needs a driver. Cancelling releases the driver
        and restocks every line. A supplied payment status must agree with
        the target status: a delivered order is always paid.
        """
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        payment_status = _parse_payment_status(command.payment_status) if command.payment_status else None

        order = load_order(command.order_id)
        target = _parse_status(order, command.status)
        if payment_status is not None:
            check_payment_status(target, payment_status)

        previous = order.status
        actor = (admin.user_id, command.actor_role)

        if command.driver_id:
            _check_driver(command.driver_id)
            if target != OrderStatus.SHIPPED:
                order.reassign_driver(str(command.driver_id), assigned_by=admin.user_id)

        match target:
            case OrderStatus.SHIPPED if command.driver_id:
                order.assign_driver(str(command.driver_id), assigned_by=admin.user_id)
            case OrderStatus.SHIPPED:
                order.mark_shipped(*actor)
            case OrderStatus.DELIVERED:
                order.mark_delivered(*actor)
            case OrderStatus.CANCELLED:
                order.cancel(*actor)
            case OrderStatus.PENDING:
                order.reassert(*actor)

        if payment_status is not None and target != OrderStatus.DELIVERED:
            order.set_payment_status(payment_status)
        _save(order, previous)

        if target == OrderStatus.CANCELLED:
            restock_lines(order)
        elif target == OrderStatus.DELIVERED:
            _credit_sales(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous,
            status=order.status,
            payment_status=order.payment_status,
            changed_by=admin.user_id,
        )
        return str(order.id)
