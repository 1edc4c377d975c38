"""A user's notification inbox, plus admin-authored notifications."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from freshcart.domain import freshcart
from freshcart.identity.user.principal import principal_from, require_admin
from freshcart.identity.user.repository import load_user
from freshcart.notifications.notification.notification import (
    MAX_MESSAGE_LENGTH,
    MAX_TITLE_LENGTH,
    Notification,
    NotificationType,
)
from freshcart.shared.errors import Forbidden, NotFound, ValidationFailed
from freshcart.shared.pagination import Page, PageRequest

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="Notification")
class SendNotification:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    recipient_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    message = Text(required=True)
    type = String(max_length=30, default=NotificationType.SYSTEM.value)
    data = Text(default="{}")  # JSON object


@freshcart.command(part_of="Notification")
class MarkNotificationRead:
    user_id = Identifier(required=True)
    notification_id = Identifier(required=True)


@freshcart.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id = Identifier(required=True)


def my_notifications(user_id: str, request: PageRequest, read: bool | None = None) -> Page[Notification]:
    return current_domain.repository_for(Notification).inbox(user_id, request, read=read)


def unread_count(user_id: str) -> int:
    return current_domain.repository_for(Notification).unread_count(user_id)


@freshcart.command_handler(part_of=Notification)
class InboxHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.find(str(command.notification_id))
        if notification is None:
            raise NotFound("Notification not found")
        if str(notification.recipient_id) != str(command.user_id):
            raise Forbidden("You cannot update this notification")
        notification.mark_read()
        repo.add(notification)
        return str(notification.id)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        return current_domain.repository_for(Notification).mark_all_read(str(command.user_id))

    @handle(SendNotification)
    def send_notification(self, command):
        """Admin-authored notification; it is pushed once stored."""
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        title = command.title.strip()
        message = command.message.strip()
        if not title or len(title) > MAX_TITLE_LENGTH:
            raise ValidationFailed(f"Title is required and must be at most {MAX_TITLE_LENGTH} characters")
        if not message or len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationFailed(f"Message is required and must be at most {MAX_MESSAGE_LENGTH} characters")
        if command.type not in {t.value for t in NotificationType}:
            raise ValidationFailed(f"Invalid notification type {command.type!r}")

        recipient = load_user(str(command.recipient_id))
        notification = Notification.create(
            recipient_id=str(recipient.id),
            title=title,
            message=message,
            type=command.type,
            data=json.loads(command.data) if command.data else {},
            sender_id=admin.user_id,
            sender_role=command.actor_role,
        )
        current_domain.repository_for(Notification).add(notification)

        logger.info("notification_sent", notification_id=str(notification.id), recipient_id=str(recipient.id))
        return str(notification.id)
