"""Domain events for the Order aggregate.

Raised by the aggregate, stored on the ``freshcart::order`` stream and
consumed by Notifications. An order placed at checkout raises nothing;
only driver assignment and status changes are published.
"""

from protean.fields import DateTime, Identifier, String

from freshcart.domain import freshcart


@freshcart.event(part_of="Order")
class DriverAssigned:
    """An admin assigned a driver, which also ships the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    assigned_by = Identifier()
    assigned_at = DateTime(required=True)


@freshcart.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    driver_id = Identifier()
    status = String(required=True, max_length=20)
    previous_status = String(required=True, max_length=20)
    payment_status = String(max_length=20)
    actor_id = Identifier()
    actor_role = String(max_length=20)
    changed_at = DateTime(required=True)
