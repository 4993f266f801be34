"""
Interview Applications Repository

Database operations for interview applications. Every read excludes
soft-deleted rows.
"""

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import InterviewApplication, InterviewStatus
from .schemas import InterviewApplicationCreate


def _live():
    return InterviewApplication.deleted_at.is_(None)


async def create(db: AsyncSession, data: InterviewApplicationCreate) -> InterviewApplication:
    """Create a new interview application in pending status."""
    application = InterviewApplication(
        name=data.name,
        email=data.email.lower(),
        phone=data.phone,
        student_id=data.student_id,
        major=data.major,
        grade=data.grade,
        interview_time=data.interview_time,
        status=InterviewStatus.PENDING,
    )

    db.add(application)
    await db.commit()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, application_id: int) -> InterviewApplication | None:
    result = await db.execute(
        select(InterviewApplication).where(InterviewApplication.id == application_id, _live())
    )
    return result.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> InterviewApplication | None:
    """Get the live application for an email (case-insensitive)."""
    result = await db.execute(
        select(InterviewApplication)
        .where(func.lower(InterviewApplication.email) == email.lower(), _live())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_applications(
    db: AsyncSession,
    *,
    status: InterviewStatus | None = None,
    name: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[InterviewApplication], int]:
    """
    Get one page of applications, newest first.

    Args:
        db: Database session
        status: Filter by status (optional)
        name: Case-insensitive substring of the applicant name (optional)
        offset: Rows to skip
        limit: Maximum rows to return

    Returns:
        Tuple of (applications on the page, total count matching filters)
    """
    query = select(InterviewApplication).where(_live())

    if status:
        query = query.where(InterviewApplication.status == status)

    if name:
        query = query.where(InterviewApplication.name.ilike(f"%{name}%"))

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = (
        query.order_by(InterviewApplication.created_at.desc(), InterviewApplication.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def update_status(
    db: AsyncSession,
    application: InterviewApplication,
    status: InterviewStatus,
    admin_remarks: str | None,
) -> InterviewApplication:
    """Overwrite status and remarks. Any status may follow any other."""
    application.status = status
    application.admin_remarks = admin_remarks
    await db.commit()
    await db.refresh(application)
    return application


async def soft_delete(db: AsyncSession, application: InterviewApplication) -> None:
    application.soft_delete()
    await db.commit()


async def get_stats(db: AsyncSession) -> dict[str, int]:
    """Count live applications in total and per status, in one query."""
    query = select(
        func.count().label("total"),
        *[
            func.count(case((InterviewApplication.status == status, 1))).label(status.value)
            for status in InterviewStatus
        ],
    ).where(_live())

    row = (await db.execute(query)).one()
    return {key: int(value or 0) for key, value in row._mapping.items()}
