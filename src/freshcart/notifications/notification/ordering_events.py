"""Inbound event handlers: Notifications reacts to Ordering events.

DriverAssigned notifies the driver and the customer. OrderStatusChanged
notifies both of them when the order ships or is delivered, and the
customer alone when an admin cancels it.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from freshcart.domain import freshcart
from freshcart.identity.user.user import Role, User
from freshcart.notifications.notification.helpers import create_notification
from freshcart.notifications.notification.notification import Notification
from freshcart.ordering.order.events import DriverAssigned, OrderStatusChanged
from freshcart.ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


def _order_data(order_id: str) -> dict:
    return {"orderId": order_id, "url": f"/orders/{order_id}"}


@freshcart.event_handler(part_of=Notification, stream_category="freshcart::order")
class OrderingEventsHandler:
    @handle(DriverAssigned)
    def on_driver_assigned(self, event: DriverAssigned) -> None:
        order_id = str(event.order_id)
        driver = current_domain.repository_for(User).find(str(event.driver_id))
        data = _order_data(order_id)
        sender = {
            "sender_id": event.assigned_by,
            "sender_role": Role.ADMIN.value,
            "source_event_type": DriverAssigned.__type__,
        }

        create_notification(
            recipient_id=str(event.driver_id),
            template_key="driver_assigned.driver",
            context={"order_id": order_id},
            data=data,
            **sender,
        )
        create_notification(
            recipient_id=str(event.customer_id),
            template_key="driver_assigned.customer",
            context={"order_id": order_id, "driver_name": driver.username if driver else None},
            data={**data, "driverId": str(event.driver_id)},
            **sender,
        )
        logger.info("driver_assignment_notified", order_id=order_id, driver_id=str(event.driver_id))

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        order_id = str(event.order_id)
        customer_id = str(event.customer_id)
        driver_id = str(event.driver_id) if event.driver_id else None

        recipients: list[tuple[str, str, dict]] = []
        match OrderStatus(event.status):
            case OrderStatus.SHIPPED:
                recipients.append((customer_id, "order_shipped.customer", {}))
                if driver_id:
                    recipients.append((driver_id, "order_shipped.driver", {}))
            case OrderStatus.DELIVERED:
                order = current_domain.repository_for(Order).find(order_id)
                context = {"total": order.total} if order else {}
                recipients.append((customer_id, "order_delivered.customer", context))
                if driver_id:
                    recipients.append((driver_id, "order_delivered.driver", {}))
            case OrderStatus.CANCELLED if event.actor_role == Role.ADMIN.value:
                recipients.append((customer_id, "order_cancelled.customer", {}))
            case _:
                logger.debug("status_change_not_notified", order_id=order_id, status=event.status)
                return

        for recipient, key, context in recipients:
            create_notification(
                recipient_id=recipient,
                template_key=key,
                context=context,
                data=_order_data(order_id),
                sender_id=event.actor_id,
                sender_role=event.actor_role,
                source_event_type=OrderStatusChanged.__type__,
            )
        logger.info(
            "order_status_notified",
            order_id=order_id,
            status=event.status,
            recipients=[recipient for recipient, _, _ in recipients],
        )
