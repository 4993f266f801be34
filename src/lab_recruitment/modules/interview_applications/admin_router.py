"""
Interview Applications Admin Router

Endpoints for admins to review interview applications.
All endpoints require a valid access token with the admin role.

Endpoints:
- GET /admin/applications - List applications with filters and pagination
- GET /admin/applications/stats - Counts per status
- GET /admin/applications/{id} - Application details
- PUT /admin/applications/{id} - Set status and remarks
- DELETE /admin/applications/{id} - Soft delete
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.auth import CurrentUser, get_current_admin_user
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, Page, require_json
from lab_recruitment.modules.interview_applications import service
from lab_recruitment.modules.interview_applications.models import InterviewStatus
from lab_recruitment.modules.interview_applications.schemas import (
    InterviewApplicationResponse,
    InterviewApplicationUpdate,
    InterviewStats,
)
from lab_recruitment.modules.interview_applications.service import ApplicationServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: ApplicationServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


@router.get("", response_model=ApiResponse[Page[InterviewApplicationResponse]])
async def list_applications(
    page: int = Query(1, description="Page number, floored at 1"),
    size: int = Query(10, description="Page size, clamped to 1-100"),
    status: InterviewStatus | None = Query(None, description="Filter by status"),
    name: str | None = Query(None, max_length=100, description="Search applicant name"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[Page[InterviewApplicationResponse]]:
    """List applications, newest first."""
    result = await service.list_applications(
        db, page=page, size=size, status=status, name=name
    )

    logger.info(
        f"Admin {admin.id} listed applications: "
        f"total={result['total']}, returned={len(result['items'])}"
    )

    return ApiResponse(
        data=Page(
            total=result["total"],
            page=result["page"],
            size=result["size"],
            items=[InterviewApplicationResponse.model_validate(a) for a in result["items"]],
        )
    )


@router.get("/stats", response_model=ApiResponse[InterviewStats])
async def get_stats(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[InterviewStats]:
    stats = await service.get_stats(db)
    return ApiResponse(data=InterviewStats(**stats))


@router.get("/{application_id}", response_model=ApiResponse[InterviewApplicationResponse])
async def get_application_detail(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[InterviewApplicationResponse]:
    try:
        application = await service.get_application(db, application_id)
    except ApplicationServiceError as e:
        logger.warning(f"Application not found: {application_id}")
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} viewed application {application_id}")
    return ApiResponse(data=InterviewApplicationResponse.model_validate(application))


@router.put(
    "/{application_id}",
    response_model=ApiResponse[InterviewApplicationResponse],
    dependencies=[Depends(require_json)],
)
async def update_application(
    application_id: int,
    data: InterviewApplicationUpdate,
    notify: bool = Query(True, description="Email the applicant about the change"),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[InterviewApplicationResponse]:
    """
    Set status and remarks. Any status may be set from any other.

    Raises:
        HTTPException 404: Application not found
    """
    try:
        application = await service.update_application(
            db, application_id, data.status, data.admin_remarks, notify=notify
        )
    except ApplicationServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} set application {application_id} to {data.status.value}")
    return ApiResponse(
        message="Application updated",
        data=InterviewApplicationResponse.model_validate(application),
    )


@router.delete("/{application_id}", response_model=ApiResponse[None])
async def delete_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[None]:
    try:
        await service.delete_application(db, application_id)
    except ApplicationServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} deleted application {application_id}")
    return ApiResponse(message="Application deleted")
