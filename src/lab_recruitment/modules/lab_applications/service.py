"""
Lab Applications Service Layer

Students apply to active labs that still have free slots. Admins accept or
reject pending applications; accepting takes one slot in the lab. Every
decision leaves a notification for the student.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.responses import normalize_pagination
from lab_recruitment.modules.lab_applications import repository
from lab_recruitment.modules.lab_applications.models import (
    LabApplication,
    LabApplicationStatus,
)
from lab_recruitment.modules.lab_applications.schemas import LabApplicationCreate
from lab_recruitment.modules.labs import repository as lab_repository
from lab_recruitment.modules.labs.models import Lab, LabStatus
from lab_recruitment.modules.notifications import service as notification_service
from lab_recruitment.modules.notifications.models import NotificationType

logger = logging.getLogger(__name__)


class LabApplicationServiceError(Exception):
    """Base exception for lab application errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class LabApplicationNotFoundError(LabApplicationServiceError):
    def __init__(self, application_id: int):
        super().__init__(
            message=f"Application {application_id} not found",
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class LabUnavailableError(LabApplicationServiceError):
    """Raised when the lab is missing, inactive or full."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message=message, error_code="LAB_UNAVAILABLE", status_code=status_code)


class DuplicateLabApplicationError(LabApplicationServiceError):
    def __init__(self):
        super().__init__(
            message="You have already applied to this lab.",
            error_code="DUPLICATE_APPLICATION",
            status_code=409,
        )


class ApplicationAlreadyReviewedError(LabApplicationServiceError):
    def __init__(self, status: LabApplicationStatus):
        super().__init__(
            message=f"Application has already been reviewed ({status.value}).",
            error_code="INVALID_APPLICATION_STATE",
            status_code=409,
        )


async def _get_open_lab(db: AsyncSession, lab_id: int) -> Lab:
    lab = await lab_repository.get_by_id(db, lab_id)
    if lab is None:
        raise LabUnavailableError(f"Lab {lab_id} not found", status_code=404)
    if lab.status != LabStatus.ACTIVE:
        raise LabUnavailableError("This lab is not accepting applications.")
    if lab.is_full:
        raise LabUnavailableError("This lab has no available slots.", status_code=409)
    return lab


async def submit(db: AsyncSession, user_id: int, data: LabApplicationCreate) -> LabApplication:
    """
    Apply to a lab.

    Raises:
        LabUnavailableError: Lab missing (404), inactive (400) or full (409)
        DuplicateLabApplicationError: The user already applied to this lab
    """
    lab = await _get_open_lab(db, data.lab_id)

    existing = await repository.get_by_user_and_lab(db, user_id, lab.id)
    if existing is not None:
        logger.warning(f"Duplicate lab application: user {user_id} lab {lab.id}")
        raise DuplicateLabApplicationError()

    application = await repository.create(db, user_id, data)
    logger.info(f"Lab application {application.id} created: user {user_id} -> lab {lab.id}")
    return application


async def list_applications(
    db: AsyncSession,
    *,
    page: int = 1,
    size: int = 10,
    user_id: int | None = None,
    lab_id: int | None = None,
    status: LabApplicationStatus | None = None,
) -> dict:
    page, size = normalize_pagination(page, size)
    items, total = await repository.list_applications(
        db,
        user_id=user_id,
        lab_id=lab_id,
        status=status,
        offset=(page - 1) * size,
        limit=size,
    )
    return {"total": total, "page": page, "size": size, "items": items}


async def get_application(db: AsyncSession, application_id: int) -> LabApplication:
    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise LabApplicationNotFoundError(application_id)
    return application


async def review(
    db: AsyncSession,
    application_id: int,
    reviewer_id: int,
    status: LabApplicationStatus,
    feedback: str | None = None,
) -> LabApplication:
    """
    Accept or reject a pending application.

    The decision, the lab's member count and the student's notification are
    committed together.

    Raises:
        LabApplicationNotFoundError: Unknown application
        ApplicationAlreadyReviewedError: Application is not pending
        LabUnavailableError: Accepting into a full or missing lab
    """
    application = await get_application(db, application_id)
    if not application.is_pending:
        raise ApplicationAlreadyReviewedError(application.status)

    lab = await lab_repository.get_by_id(db, application.lab_id)
    if lab is None:
        raise LabUnavailableError(f"Lab {application.lab_id} not found", status_code=404)

    if status == LabApplicationStatus.ACCEPTED:
        if not await lab_repository.reserve_slot(db, lab.id):
            raise LabUnavailableError("This lab has no available slots.", status_code=409)

    application.status = status
    application.feedback = feedback
    application.reviewed_by = reviewer_id
    application.reviewed_at = datetime.now(UTC)

    verdict = "accepted" if status == LabApplicationStatus.ACCEPTED else "rejected"
    content = f"Your application to {lab.name} was {verdict}."
    if feedback:
        content = f"{content} Feedback: {feedback}"

    await notification_service.notify(
        db,
        user_id=application.user_id,
        title=f"Application {verdict}",
        content=content,
        type=NotificationType.APPLICATION,
        related_id=application.id,
        commit=False,
    )

    await db.commit()
    await db.refresh(application)

    logger.info(
        f"Lab application {application_id} {verdict} by user {reviewer_id} "
        f"(lab {lab.id}: {lab.current_members}/{lab.max_members})"
    )
    return application
