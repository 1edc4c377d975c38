"""In-app notifications.

One notification per recipient per message. Notifications are created in
reaction to ordering events, or directly by an admin, and are then pushed
to the recipient's live channel. ``read`` is the only thing that changes
afterwards.
"""

import json
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from freshcart.domain import freshcart
from freshcart.notifications.notification.events import NotificationCreated
from freshcart.shared.clock import utcnow

MAX_TITLE_LENGTH = 100
MAX_MESSAGE_LENGTH = 500


class NotificationType(Enum):
    DRIVER_ASSIGNED = "driver_assigned"
    DRIVER_ETA = "driver_eta"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    PRODUCT_ADDED = "product_added"
    SYSTEM = "system"


@freshcart.aggregate
class Notification:
    recipient_id: Identifier(required=True)
    sender_id: Identifier()
    sender_role: String(max_length=20)
    title: String(required=True, max_length=MAX_TITLE_LENGTH)
    message: String(required=True, max_length=MAX_MESSAGE_LENGTH)
    type: String(choices=NotificationType, default=NotificationType.SYSTEM.value)
    read: Boolean(default=False)
    data: Text(default="{}")  # JSON object: orderId, productId, url, ...
    source_event_type: String(max_length=120)
    created_at: DateTime(default=utcnow)

    @classmethod
    def create(
        cls,
        recipient_id,
        title,
        message,
        type=NotificationType.SYSTEM.value,
        data=None,
        sender_id=None,
        sender_role=None,
        source_event_type=None,
    ):
        now = utcnow()
        notification = cls(
            recipient_id=recipient_id,
            sender_id=sender_id,
            sender_role=sender_role,
            title=title,
            message=message,
            type=type,
            read=False,
            data=json.dumps(data or {}),
            source_event_type=source_event_type,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                type=type,
                source_event_type=source_event_type,
                created_at=now,
            )
        )
        return notification

    @property
    def payload(self) -> dict:
        return json.loads(self.data) if self.data else {}

    def mark_read(self) -> None:
        self.read = True

    def to_push_payload(self) -> dict:
        return {
            "id": str(self.id),
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "data": self.payload,
        }
