"""Push dispatch: sends each stored notification to its recipient's live channel.

Reacts to NotificationCreated, which is only handled once the
notification itself has been committed. A failed push is logged and left
at that; the stored notification remains the record.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from freshcart.domain import freshcart
from freshcart.notifications.channel import get_push_channel
from freshcart.notifications.notification.events import NotificationCreated
from freshcart.notifications.notification.notification import Notification

logger = structlog.get_logger(__name__)


def deliver(notification: Notification) -> bool:
    """Push a stored notification. Returns whether the channel accepted it."""
    result = get_push_channel().send(
        recipient_id=str(notification.recipient_id),
        title=notification.title,
        body=notification.message,
        data=notification.to_push_payload(),
    )
    if result["status"] != "sent":
        logger.warning(
            "push_failed",
            notification_id=str(notification.id),
            recipient_id=str(notification.recipient_id),
            error=result.get("error"),
        )
        return False
    return True


@freshcart.event_handler(part_of=Notification)
class PushDispatcher:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        notification = current_domain.repository_for(Notification).find(str(event.notification_id))
        if notification is None:
            logger.warning("push_skipped_missing_notification", notification_id=str(event.notification_id))
            return
        deliver(notification)
