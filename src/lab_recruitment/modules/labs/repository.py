"""
Lab Repository

Database operations for labs. Soft-deleted labs are excluded from reads.
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Lab, LabStatus


async def create(db: AsyncSession, *, created_by: int, **fields) -> Lab:
    lab = Lab(created_by=created_by, current_members=0, **fields)
    db.add(lab)
    await db.commit()
    await db.refresh(lab)
    return lab


async def get_by_id(db: AsyncSession, lab_id: int) -> Lab | None:
    result = await db.execute(select(Lab).where(Lab.id == lab_id, Lab.deleted_at.is_(None)))
    return result.scalar_one_or_none()


async def list_labs(
    db: AsyncSession,
    *,
    status: LabStatus | None = None,
    keyword: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Lab], int]:
    """
    Get one page of labs, newest first.

    Returns:
        Tuple of (labs on the page, total count matching filters)
    """
    query = select(Lab).where(Lab.deleted_at.is_(None))

    if status:
        query = query.where(Lab.status == status)

    if keyword:
        query = query.where(Lab.name.ilike(f"%{keyword}%"))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = query.order_by(Lab.created_at.desc(), Lab.id.desc()).offset(offset).limit(limit)
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def reserve_slot(db: AsyncSession, lab_id: int) -> bool:
    """
    Take one member slot if the lab still has room. Does not commit.

    Returns:
        True if a slot was taken, False if the lab is full or missing
    """
    result = await db.execute(
        update(Lab)
        .where(
            Lab.id == lab_id,
            Lab.deleted_at.is_(None),
            Lab.current_members < Lab.max_members,
        )
        .values(current_members=Lab.current_members + 1)
    )
    return result.rowcount == 1


async def save(db: AsyncSession, lab: Lab) -> Lab:
    await db.commit()
    await db.refresh(lab)
    return lab


async def soft_delete(db: AsyncSession, lab: Lab) -> None:
    lab.soft_delete()
    await db.commit()
