"""
Lab Applications Repository

Database operations for student applications to labs.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import LabApplication, LabApplicationStatus
from .schemas import LabApplicationCreate


def _live():
    return LabApplication.deleted_at.is_(None)


async def create(db: AsyncSession, user_id: int, data: LabApplicationCreate) -> LabApplication:
    application = LabApplication(
        user_id=user_id,
        lab_id=data.lab_id,
        motivation=data.motivation,
        skills=data.skills,
        experience=data.experience,
        available_time=data.available_time,
        resume_url=data.resume_url,
        status=LabApplicationStatus.PENDING,
    )
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


async def get_by_id(db: AsyncSession, application_id: int) -> LabApplication | None:
    result = await db.execute(
        select(LabApplication).where(LabApplication.id == application_id, _live())
    )
    return result.scalar_one_or_none()


async def get_by_user_and_lab(
    db: AsyncSession, user_id: int, lab_id: int
) -> LabApplication | None:
    result = await db.execute(
        select(LabApplication)
        .where(LabApplication.user_id == user_id, LabApplication.lab_id == lab_id, _live())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_applications(
    db: AsyncSession,
    *,
    user_id: int | None = None,
    lab_id: int | None = None,
    status: LabApplicationStatus | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[LabApplication], int]:
    """
    Get one page of lab applications, newest first.

    Returns:
        Tuple of (applications on the page, total count matching filters)
    """
    query = select(LabApplication).where(_live())

    if user_id is not None:
        query = query.where(LabApplication.user_id == user_id)
    if lab_id is not None:
        query = query.where(LabApplication.lab_id == lab_id)
    if status:
        query = query.where(LabApplication.status == status)

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        query.order_by(LabApplication.created_at.desc(), LabApplication.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total
