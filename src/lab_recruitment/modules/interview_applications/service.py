"""
Interview Applications Service Layer

Business logic for interview applications.

1. Code request:
   - Reject emails that already have an application
   - Issue a verification code and email it

2. Submission:
   - Reject duplicates (one live application per email)
   - Consume the verification code
   - Persist the application as pending
   - Send a confirmation email (best effort, failure is only logged)

3. Admin review:
   - Paginated listing with status and name filters
   - Status updates overwrite status and remarks without transition rules
   - Soft delete and per-status statistics

The duplicate check is a lookup before insert, so two concurrent
submissions for the same email can both pass it.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.email import send_application_confirmation, send_application_status_update
from lab_recruitment.core.responses import normalize_pagination
from lab_recruitment.modules.interview_applications import repository
from lab_recruitment.modules.interview_applications.models import (
    InterviewApplication,
    InterviewStatus,
)
from lab_recruitment.modules.interview_applications.schemas import InterviewApplicationCreate
from lab_recruitment.modules.verification import VerificationCodeRegistry

logger = logging.getLogger(__name__)


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class DuplicateApplicationError(ApplicationServiceError):
    """Raised when the email already has an application."""

    def __init__(self):
        super().__init__(
            message="An application has already been submitted with this email.",
            error_code="DUPLICATE_APPLICATION",
            status_code=409,
        )


class ApplicationNotFoundError(ApplicationServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: int | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class InvalidVerificationCodeError(ApplicationServiceError):
    """Raised when the submitted code is missing, wrong, used or expired."""

    def __init__(self):
        super().__init__(
            message="Invalid or expired verification code.",
            error_code="INVALID_VERIFICATION_CODE",
            status_code=400,
        )


async def _check_duplicate(db: AsyncSession, email: str) -> None:
    existing = await repository.get_by_email(db, email)
    if existing is not None:
        logger.warning(f"Duplicate application rejected for {email} (existing id={existing.id})")
        raise DuplicateApplicationError()


async def request_code(
    db: AsyncSession,
    registry: VerificationCodeRegistry,
    email: str,
) -> str:
    """
    Issue a verification code for a prospective applicant.

    Returns:
        The issued code (only ever shown to the client in email test mode)

    Raises:
        DuplicateApplicationError: If the email already applied
        EmailDeliveryError: If the code email could not be sent
    """
    email = email.lower()
    await _check_duplicate(db, email)
    return await registry.issue_code(email)


async def submit_application(
    db: AsyncSession,
    registry: VerificationCodeRegistry,
    data: InterviewApplicationCreate,
) -> InterviewApplication:
    """
    Submit an interview application.

    Args:
        db: Database session
        registry: Verification code registry holding the applicant's code
        data: Validated application fields including the code

    Returns:
        The persisted application with status pending

    Raises:
        DuplicateApplicationError: If the email already applied
        InvalidVerificationCodeError: If the code does not verify
    """
    email = data.email.lower()
    logger.info(f"Processing interview application for {email}")

    await _check_duplicate(db, email)

    if not await registry.verify_and_consume(email, data.code):
        logger.warning(f"Interview application rejected for {email}: verification failed")
        raise InvalidVerificationCodeError()

    application = await repository.create(db, data)
    logger.info(f"Created interview application {application.id} for {email}")

    try:
        email_sent = await send_application_confirmation(
            to_email=application.email,
            applicant_name=application.name,
        )
        if not email_sent:
            logger.error(f"Failed to send confirmation email for application {application.id}")
    except Exception as e:
        logger.error(f"Exception sending confirmation email for application {application.id}: {e}")

    return application


async def get_application(db: AsyncSession, application_id: int) -> InterviewApplication:
    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise ApplicationNotFoundError(application_id)
    return application


async def list_applications(
    db: AsyncSession,
    *,
    page: int = 1,
    size: int = 10,
    status: InterviewStatus | None = None,
    name: str | None = None,
) -> dict:
    """
    List applications for the admin dashboard.

    Page is floored at 1 and size clamped into [1, 100].

    Returns:
        Dict with total, page, size and items
    """
    page, size = normalize_pagination(page, size)
    name = name.strip() if name else None

    applications, total = await repository.list_applications(
        db,
        status=status,
        name=name or None,
        offset=(page - 1) * size,
        limit=size,
    )

    return {
        "total": total,
        "page": page,
        "size": size,
        "items": applications,
    }


async def update_application(
    db: AsyncSession,
    application_id: int,
    status: InterviewStatus,
    admin_remarks: str | None,
    notify: bool = True,
) -> InterviewApplication:
    """
    Set an application's status and remarks.

    Raises:
        ApplicationNotFoundError: If the application does not exist
    """
    application = await get_application(db, application_id)
    previous = application.status

    application = await repository.update_status(db, application, status, admin_remarks)
    logger.info(
        f"Interview application {application_id} status changed: "
        f"{previous.value} -> {status.value}"
    )

    if notify and previous != status:
        try:
            email_sent = await send_application_status_update(
                to_email=application.email,
                applicant_name=application.name,
                status=status.value,
                remarks=admin_remarks,
            )
            if not email_sent:
                logger.error(f"Failed to send status email for application {application_id}")
        except Exception as e:
            logger.error(f"Exception sending status email for application {application_id}: {e}")

    return application


async def delete_application(db: AsyncSession, application_id: int) -> None:
    """
    Soft delete an application. The email may apply again afterwards.

    Raises:
        ApplicationNotFoundError: If the application does not exist
    """
    application = await get_application(db, application_id)
    await repository.soft_delete(db, application)
    logger.info(f"Interview application {application_id} deleted")


async def get_stats(db: AsyncSession) -> dict[str, int]:
    return await repository.get_stats(db)
