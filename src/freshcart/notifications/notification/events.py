"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String

from freshcart.domain import freshcart


@freshcart.event(part_of="Notification")
class NotificationCreated:
    """A notification was stored and is ready to be pushed to its recipient."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    type = String(required=True, max_length=30)
    source_event_type = String(max_length=120)
    created_at = DateTime(required=True)
