"""
Notification Service Layer

Users only ever see and modify their own notifications; a notification
owned by someone else is reported as not found.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.responses import normalize_pagination
from lab_recruitment.modules.notifications import repository
from lab_recruitment.modules.notifications.models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationServiceError(Exception):
    """Base exception for notification service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotificationNotFoundError(NotificationServiceError):
    def __init__(self, notification_id: int):
        super().__init__(
            message=f"Notification {notification_id} not found",
            error_code="NOTIFICATION_NOT_FOUND",
            status_code=404,
        )


async def notify(
    db: AsyncSession,
    *,
    user_id: int,
    title: str,
    content: str,
    type: NotificationType = NotificationType.SYSTEM,
    related_id: int | None = None,
    commit: bool = True,
) -> Notification:
    notification = await repository.create(
        db,
        user_id=user_id,
        title=title,
        content=content,
        type=type,
        related_id=related_id,
        commit=commit,
    )
    logger.info(f"Notification queued for user {user_id}: {title}")
    return notification


async def list_notifications(
    db: AsyncSession,
    user_id: int,
    *,
    page: int = 1,
    size: int = 10,
    unread_only: bool = False,
) -> dict:
    page, size = normalize_pagination(page, size)
    items, total = await repository.list_for_user(
        db,
        user_id,
        unread_only=unread_only,
        offset=(page - 1) * size,
        limit=size,
    )
    return {"total": total, "page": page, "size": size, "items": items}


async def mark_read(db: AsyncSession, user_id: int, notification_id: int) -> Notification:
    """
    Raises:
        NotificationNotFoundError: If the notification does not exist or is not the user's
    """
    notification = await repository.get_for_user(db, notification_id, user_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    if notification.is_read:
        return notification
    return await repository.mark_read(db, notification)


async def mark_all_read(db: AsyncSession, user_id: int) -> int:
    updated = await repository.mark_all_read(db, user_id)
    logger.info(f"Marked {updated} notifications read for user {user_id}")
    return updated


async def get_stats(db: AsyncSession, user_id: int) -> dict[str, int]:
    return await repository.get_stats(db, user_id)
