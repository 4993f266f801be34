"""
Labs Router

Endpoints:
- GET /labs - List labs (public; non-admins only see active labs)
- GET /labs/{id} - Lab details
- POST /labs - Create a lab (admin)
- PUT /labs/{id} - Update a lab (admin)
- DELETE /labs/{id} - Soft delete a lab (admin)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.auth import CurrentUser, get_current_admin_user, get_optional_user
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, Page, require_json
from lab_recruitment.modules.labs import service
from lab_recruitment.modules.labs.models import LabStatus
from lab_recruitment.modules.labs.schemas import LabCreate, LabResponse, LabUpdate
from lab_recruitment.modules.labs.service import LabServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: LabServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


@router.get("", response_model=ApiResponse[Page[LabResponse]])
async def list_labs(
    page: int = Query(1),
    size: int = Query(10),
    status: LabStatus | None = Query(None, description="Admins only; others see active labs"),
    keyword: str | None = Query(None, max_length=100, description="Search lab name"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_optional_user),
) -> ApiResponse[Page[LabResponse]]:
    if user is None or not user.is_admin:
        status = LabStatus.ACTIVE

    result = await service.list_labs(db, page=page, size=size, status=status, keyword=keyword)
    return ApiResponse(
        data=Page(
            total=result["total"],
            page=result["page"],
            size=result["size"],
            items=[LabResponse.model_validate(lab) for lab in result["items"]],
        )
    )


@router.get("/{lab_id}", response_model=ApiResponse[LabResponse])
async def get_lab(
    lab_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser | None = Depends(get_optional_user),
) -> ApiResponse[LabResponse]:
    include_inactive = user is not None and user.is_admin
    try:
        lab = await service.get_lab(db, lab_id, include_inactive=include_inactive)
    except LabServiceError as e:
        _handle_service_error(e)

    return ApiResponse(data=LabResponse.model_validate(lab))


@router.post(
    "",
    response_model=ApiResponse[LabResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json)],
)
async def create_lab(
    data: LabCreate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[LabResponse]:
    lab = await service.create_lab(db, data, created_by=admin.id)
    return ApiResponse(
        code=status.HTTP_201_CREATED,
        message="Lab created",
        data=LabResponse.model_validate(lab),
    )


@router.put(
    "/{lab_id}",
    response_model=ApiResponse[LabResponse],
    dependencies=[Depends(require_json)],
)
async def update_lab(
    lab_id: int,
    data: LabUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[LabResponse]:
    try:
        lab = await service.update_lab(db, lab_id, data)
    except LabServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} updated lab {lab_id}")
    return ApiResponse(message="Lab updated", data=LabResponse.model_validate(lab))


@router.delete("/{lab_id}", response_model=ApiResponse[None])
async def delete_lab(
    lab_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(get_current_admin_user),
) -> ApiResponse[None]:
    try:
        await service.delete_lab(db, lab_id)
    except LabServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} deleted lab {lab_id}")
    return ApiResponse(message="Lab deleted")
