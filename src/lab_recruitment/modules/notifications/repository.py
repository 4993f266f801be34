"""
Notification Repository

All queries are scoped to one user.
"""

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Notification, NotificationType


def _live():
    return Notification.deleted_at.is_(None)


async def create(
    db: AsyncSession,
    *,
    user_id: int,
    title: str,
    content: str,
    type: NotificationType,
    related_id: int | None = None,
    commit: bool = True,
) -> Notification:
    """
    Add a notification.

    With commit=False the row joins the caller's transaction.
    """
    notification = Notification(
        user_id=user_id,
        title=title,
        content=content,
        type=type,
        related_id=related_id,
        is_read=False,
    )
    db.add(notification)
    if commit:
        await db.commit()
        await db.refresh(notification)
    return notification


async def get_for_user(
    db: AsyncSession, notification_id: int, user_id: int
) -> Notification | None:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
            _live(),
        )
    )
    return result.scalar_one_or_none()


async def list_for_user(
    db: AsyncSession,
    user_id: int,
    *,
    unread_only: bool = False,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Notification], int]:
    query = select(Notification).where(Notification.user_id == user_id, _live())
    if unread_only:
        query = query.where(Notification.is_read.is_(False))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def mark_read(db: AsyncSession, notification: Notification) -> Notification:
    notification.is_read = True
    await db.commit()
    await db.refresh(notification)
    return notification


async def mark_all_read(db: AsyncSession, user_id: int) -> int:
    """Mark every unread notification of the user as read; returns the row count."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False), _live())
        .values(is_read=True)
    )
    await db.commit()
    return result.rowcount or 0


async def get_stats(db: AsyncSession, user_id: int) -> dict[str, int]:
    query = select(
        func.count().label("total"),
        func.count(case((Notification.is_read.is_(False), 1))).label("unread"),
    ).where(Notification.user_id == user_id, _live())

    row = (await db.execute(query)).one()
    total = int(row.total or 0)
    unread = int(row.unread or 0)
    return {"total": total, "unread": unread, "read": total - unread}
