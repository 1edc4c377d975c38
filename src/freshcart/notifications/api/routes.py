"""FastAPI routes for the notification inbox."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from freshcart.identity.api.dependencies import get_admin, get_current_user
from freshcart.identity.user.principal import Admin, acting_as
from freshcart.identity.user.user import User
from freshcart.notifications.api.schemas import (
    MarkedReadSchema,
    NotificationListSchema,
    NotificationSchema,
    SendNotificationRequest,
    UnreadCountSchema,
)
from freshcart.notifications.notification import inbox
from freshcart.notifications.notification.notification import Notification
from freshcart.shared.api import ApiResponse, PaginationSchema
from freshcart.shared.pagination import PageRequest

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification(notification_id: str) -> NotificationSchema:
    return NotificationSchema.model_validate(current_domain.repository_for(Notification).get(notification_id))


@notification_router.get("/me", response_model=ApiResponse[NotificationListSchema])
async def my_notifications(
    page: int = Query(1, ge=1),
    limit: str = Query("20"),
    read: bool | None = None,
    user: User = Depends(get_current_user),
):
    result = inbox.my_notifications(str(user.id), PageRequest.of(page, limit), read=read)
    return ApiResponse(
        data=NotificationListSchema(
            notifications=[NotificationSchema.model_validate(n) for n in result.items],
            pagination=PaginationSchema.from_page(result),
        )
    )


@notification_router.get("/me/unread-count", response_model=ApiResponse[UnreadCountSchema])
async def unread_count(user: User = Depends(get_current_user)):
    return ApiResponse(data=UnreadCountSchema(count=inbox.unread_count(str(user.id))))


@notification_router.patch("/me/read-all", response_model=ApiResponse[MarkedReadSchema])
async def read_all(user: User = Depends(get_current_user)):
    updated = current_domain.process(inbox.MarkAllNotificationsRead(user_id=str(user.id)), asynchronous=False)
    return ApiResponse(message="All notifications marked as read", data=MarkedReadSchema(updated=updated))


@notification_router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationSchema])
async def read_one(notification_id: str, user: User = Depends(get_current_user)):
    command = inbox.MarkNotificationRead(user_id=str(user.id), notification_id=notification_id)
    current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Notification marked as read", data=_notification(notification_id))


@notification_router.post("", status_code=201, response_model=ApiResponse[NotificationSchema])
async def send(body: SendNotificationRequest, admin: Admin = Depends(get_admin)):
    command = inbox.SendNotification(
        **acting_as(admin),
        recipient_id=body.to,
        title=body.title,
        message=body.message,
        type=body.type,
        data=json.dumps(body.data),
    )
    notification_id = current_domain.process(command, asynchronous=False)
    return ApiResponse(message="Notification sent", data=_notification(notification_id))
