from fastapi import APIRouter

from lab_recruitment.modules.auth import router as auth_router
from lab_recruitment.modules.interview_applications import admin_router as admin_interviews_router
from lab_recruitment.modules.interview_applications import router as interview_router
from lab_recruitment.modules.lab_applications import admin_router as admin_lab_apps_router
from lab_recruitment.modules.lab_applications import router as lab_apps_router
from lab_recruitment.modules.labs import router as labs_router
from lab_recruitment.modules.notifications import router as notifications_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(interview_router, tags=["Interview Applications"])

api_router.include_router(labs_router, prefix="/labs", tags=["Labs"])

api_router.include_router(lab_apps_router, prefix="/applications", tags=["Lab Applications"])

api_router.include_router(
    notifications_router, prefix="/notifications", tags=["Notifications"]
)

api_router.include_router(
    admin_interviews_router,
    prefix="/admin/applications",
    tags=["Admin - Interview Applications"],
)

api_router.include_router(
    admin_lab_apps_router,
    prefix="/admin/lab-applications",
    tags=["Admin - Lab Applications"],
)
