"""
Notifications Router

Endpoints (authenticated, scoped to the caller):
- GET /notifications - List notifications
- GET /notifications/stats - Total, unread and read counts
- PUT /notifications/read-all - Mark everything read
- PUT /notifications/{id}/read - Mark one notification read
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.auth import CurrentUser, get_current_user
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, Page
from lab_recruitment.modules.notifications import service
from lab_recruitment.modules.notifications.schemas import (
    MarkAllReadResponse,
    NotificationResponse,
    NotificationStats,
)
from lab_recruitment.modules.notifications.service import NotificationServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[NotificationResponse]])
async def list_notifications(
    page: int = Query(1),
    size: int = Query(10),
    unread_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[Page[NotificationResponse]]:
    result = await service.list_notifications(
        db, user.id, page=page, size=size, unread_only=unread_only
    )
    return ApiResponse(
        data=Page(
            total=result["total"],
            page=result["page"],
            size=result["size"],
            items=[NotificationResponse.model_validate(n) for n in result["items"]],
        )
    )


@router.get("/stats", response_model=ApiResponse[NotificationStats])
async def get_stats(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[NotificationStats]:
    stats = await service.get_stats(db, user.id)
    return ApiResponse(data=NotificationStats(**stats))


@router.put("/read-all", response_model=ApiResponse[MarkAllReadResponse])
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[MarkAllReadResponse]:
    updated = await service.mark_all_read(db, user.id)
    return ApiResponse(
        message="All notifications marked as read",
        data=MarkAllReadResponse(updated=updated),
    )


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_read(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse[NotificationResponse]:
    try:
        notification = await service.mark_read(db, user.id, notification_id)
    except NotificationServiceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e

    return ApiResponse(
        message="Notification marked as read",
        data=NotificationResponse.model_validate(notification),
    )
