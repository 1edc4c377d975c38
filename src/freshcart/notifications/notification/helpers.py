"""Shared helpers for notification handlers: render a template, store a notification."""

from protean.utils.globals import current_domain

from freshcart.notifications.notification.notification import MAX_MESSAGE_LENGTH, MAX_TITLE_LENGTH, Notification
from freshcart.notifications.templates import get_template


def create_notification(
    recipient_id: str,
    template_key: str,
    context: dict,
    data: dict | None = None,
    sender_id: str | None = None,
    sender_role: str | None = None,
    source_event_type: str | None = None,
) -> Notification:
    """Render ``template_key`` with ``context`` and store the notification."""
    template_cls = get_template(template_key)
    rendered = template_cls.render(context)

    notification = Notification.create(
        recipient_id=recipient_id,
        title=rendered["title"][:MAX_TITLE_LENGTH],
        message=rendered["message"][:MAX_MESSAGE_LENGTH],
        type=template_cls.notification_type,
        data=data,
        sender_id=sender_id,
        sender_role=sender_role,
        source_event_type=source_event_type,
    )
    current_domain.repository_for(Notification).add(notification)
    return notification
