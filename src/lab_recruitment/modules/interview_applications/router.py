"""
Interview Applications Router

Public endpoints for the interview application flow. No account is needed.

Endpoints:
- POST /send-code - Email a 6-digit verification code
- POST /apply - Submit an application with the emailed code
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.config import settings
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, require_json
from lab_recruitment.modules.interview_applications import service
from lab_recruitment.modules.interview_applications.schemas import (
    InterviewApplicationCreate,
    InterviewApplicationResponse,
    SendCodeRequest,
    SendCodeResponse,
)
from lab_recruitment.modules.interview_applications.service import ApplicationServiceError
from lab_recruitment.modules.verification import (
    VerificationCodeRegistry,
    VerificationServiceError,
    get_verification_registry,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: ApplicationServiceError | VerificationServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


@router.post(
    "/send-code",
    response_model=ApiResponse[SendCodeResponse],
    dependencies=[Depends(require_json)],
    summary="Send Verification Code",
    description="""
Email a one-time 6-digit code to the applicant.

The code is valid for five minutes and can be used once. Requesting a new
code replaces the previous one. Emails that already have an application
are rejected with 409.

When no email transport is configured (test mode) the code is included in
the response message.
""",
)
async def send_code(
    data: SendCodeRequest,
    db: AsyncSession = Depends(get_db),
    registry: VerificationCodeRegistry = Depends(get_verification_registry),
) -> ApiResponse[SendCodeResponse]:
    """
    Raises:
        HTTPException 409: Email already has an application
        HTTPException 500: Verification email could not be sent
    """
    try:
        code = await service.request_code(db, registry, data.email)
    except (ApplicationServiceError, VerificationServiceError) as e:
        logger.warning(f"Send code failed for {data.email}: {e.error_code}")
        _handle_service_error(e)

    message = "Verification code sent"
    if settings.email_test_mode:
        message = f"Verification code sent (test mode, code: {code})"

    return ApiResponse(
        message=message,
        data=SendCodeResponse(
            email=data.email.lower(),
            expires_in=int(registry.ttl.total_seconds()),
        ),
    )


@router.post(
    "/apply",
    response_model=ApiResponse[InterviewApplicationResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json)],
    summary="Submit Interview Application",
)
async def apply(
    data: InterviewApplicationCreate,
    db: AsyncSession = Depends(get_db),
    registry: VerificationCodeRegistry = Depends(get_verification_registry),
) -> ApiResponse[InterviewApplicationResponse]:
    """
    Submit an interview application.

    The verification code is consumed by this call whether or not it is
    correct.

    Raises:
        HTTPException 400: Invalid or expired verification code
        HTTPException 409: Email already has an application
    """
    try:
        application = await service.submit_application(db, registry, data)
    except ApplicationServiceError as e:
        _handle_service_error(e)

    logger.info(f"Interview application submitted: id={application.id}")

    return ApiResponse(
        code=status.HTTP_201_CREATED,
        message="Application submitted successfully",
        data=InterviewApplicationResponse.model_validate(application),
    )
