"""Notification schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from lab_recruitment.modules.notifications.models import NotificationType


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    type: NotificationType
    is_read: bool
    related_id: int | None = None
    created_at: datetime


class NotificationStats(BaseModel):
    total: int = 0
    unread: int = 0
    read: int = 0


class MarkAllReadResponse(BaseModel):
    updated: int
