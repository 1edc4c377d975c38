"""Pydantic request/response schemas for the Notifications API."""

import json
from datetime import datetime

from pydantic import Field, field_validator

from freshcart.shared.api import CamelModel, PaginationSchema


class SendNotificationRequest(CamelModel):
    to: str
    title: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=500)
    type: str = "system"
    data: dict = Field(default_factory=dict)


class NotificationSchema(CamelModel):
    id: str
    recipient_id: str
    sender_id: str | None = None
    sender_role: str | None = None
    title: str
    message: str
    type: str
    read: bool
    data: dict = Field(default_factory=dict)
    created_at: datetime | None = None

    @field_validator("data", mode="before")
    @classmethod
    def decode_data(cls, value):
        if isinstance(value, str):
            return json.loads(value) if value else {}
        return value or {}


class NotificationListSchema(CamelModel):
    notifications: list[NotificationSchema]
    pagination: PaginationSchema


class UnreadCountSchema(CamelModel):
    count: int


class MarkedReadSchema(CamelModel):
    updated: int
