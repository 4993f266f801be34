"""
Lab Applications Router

Student endpoints:
- POST /applications - Apply to a lab
- GET /applications/mine - The caller's applications

Admin endpoints:
- GET /admin/lab-applications - List with status and lab filters
- POST /admin/lab-applications/{id}/review - Accept or reject
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.auth import CurrentUser, get_current_admin_user, get_current_user
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, Page, require_json
from lab_recruitment.modules.lab_applications import service
from lab_recruitment.modules.lab_applications.models import LabApplicationStatus
from lab_recruitment.modules.lab_applications.schemas import (
    LabApplicationCreate,
    LabApplicationResponse,
    LabApplicationReview,
)
from lab_recruitment.modules.lab_applications.service import LabApplicationServiceError

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


def _handle_service_error(e: LabApplicationServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


def _to_page(result: dict) -> Page[LabApplicationResponse]:
    return Page(
        total=result["total"],
        page=result["page"],
        size=result["size"],
        items=[LabApplicationResponse.model_validate(a) for a in result["items"]],
    )


@router.post(
    "",
    response_model=ApiResponse[LabApplicationResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json)],
)
async def submit_application(
    data: LabApplicationCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[LabApplicationResponse]:
    try:
        application = await service.submit(db, user.id, data)
    except LabApplicationServiceError as e:
        _handle_service_error(e)

    return ApiResponse(
        code=status.HTTP_201_CREATED,
        message="Application submitted",
        data=LabApplicationResponse.model_validate(application),
    )


@router.get("/mine", response_model=ApiResponse[Page[LabApplicationResponse]])
async def my_applications(
    page: int = Query(1),
    size: int = Query(10),
    status: LabApplicationStatus | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[Page[LabApplicationResponse]]:
    result = await service.list_applications(
        db, page=page, size=size, user_id=user.id, status=status
    )
    return ApiResponse(data=_to_page(result))


@admin_router.get("", response_model=ApiResponse[Page[LabApplicationResponse]])
async def list_lab_applications(
    page: int = Query(1),
    size: int = Query(10),
    status: LabApplicationStatus | None = Query(None),
    lab_id: int | None = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[Page[LabApplicationResponse]]:
    result = await service.list_applications(
        db, page=page, size=size, lab_id=lab_id, status=status
    )
    logger.info(f"Admin {admin.id} listed lab applications: total={result['total']}")
    return ApiResponse(data=_to_page(result))


@admin_router.post(
    "/{application_id}/review",
    response_model=ApiResponse[LabApplicationResponse],
    dependencies=[Depends(require_json)],
)
async def review_application(
    application_id: int,
    data: LabApplicationReview,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[LabApplicationResponse]:
    try:
        application = await service.review(
            db, application_id, admin.id, data.status, data.feedback
        )
    except LabApplicationServiceError as e:
        _handle_service_error(e)

    return ApiResponse(
        message="Application reviewed",
        data=LabApplicationResponse.model_validate(application),
    )
