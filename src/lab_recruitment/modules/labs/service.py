"""
Lab Service Layer

Lab catalogue management. Students see active labs; admins create,
update and retire them.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.responses import normalize_pagination
from lab_recruitment.modules.labs import repository
from lab_recruitment.modules.labs.models import Lab, LabStatus
from lab_recruitment.modules.labs.schemas import LabCreate, LabUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "max_members", "status")


class LabServiceError(Exception):
    """Base exception for lab service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class LabNotFoundError(LabServiceError):
    def __init__(self, lab_id: int | None = None):
        message = f"Lab {lab_id} not found" if lab_id else "Lab not found"
        super().__init__(message=message, error_code="LAB_NOT_FOUND", status_code=404)


class InvalidCapacityError(LabServiceError):
    def __init__(self, current_members: int):
        super().__init__(
            message=f"max_members cannot be lower than the current member count ({current_members}).",
            error_code="INVALID_CAPACITY",
            status_code=400,
        )


async def create_lab(db: AsyncSession, data: LabCreate, created_by: int) -> Lab:
    lab = await repository.create(db, created_by=created_by, **data.model_dump())
    logger.info(f"Lab created: {lab.id} ({lab.name}) by user {created_by}")
    return lab


async def get_lab(db: AsyncSession, lab_id: int, include_inactive: bool = True) -> Lab:
    """
    Raises:
        LabNotFoundError: If the lab does not exist, or is inactive and
            include_inactive is False
    """
    lab = await repository.get_by_id(db, lab_id)
    if lab is None or (not include_inactive and lab.status != LabStatus.ACTIVE):
        raise LabNotFoundError(lab_id)
    return lab


async def list_labs(
    db: AsyncSession,
    *,
    page: int = 1,
    size: int = 10,
    status: LabStatus | None = None,
    keyword: str | None = None,
) -> dict:
    page, size = normalize_pagination(page, size)
    labs, total = await repository.list_labs(
        db,
        status=status,
        keyword=keyword.strip() if keyword else None,
        offset=(page - 1) * size,
        limit=size,
    )
    return {"total": total, "page": page, "size": size, "items": labs}


async def update_lab(db: AsyncSession, lab_id: int, data: LabUpdate) -> Lab:
    """
    Apply the provided fields to a lab.

    Raises:
        LabNotFoundError: If the lab does not exist
        InvalidCapacityError: If max_members would drop below current_members
    """
    lab = await get_lab(db, lab_id)
    changes = data.model_dump(exclude_unset=True)
    # Required columns cannot be cleared
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]

    max_members = changes.get("max_members")
    if max_members is not None and max_members < lab.current_members:
        raise InvalidCapacityError(lab.current_members)

    for field, value in changes.items():
        setattr(lab, field, value)

    lab = await repository.save(db, lab)
    logger.info(f"Lab {lab_id} updated: {sorted(changes)}")
    return lab


async def delete_lab(db: AsyncSession, lab_id: int) -> None:
    lab = await get_lab(db, lab_id)
    await repository.soft_delete(db, lab)
    logger.info(f"Lab {lab_id} deleted")
