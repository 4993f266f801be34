"""
Interview Application Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from lab_recruitment.modules.interview_applications.models import InterviewStatus

CODE_PATTERN = r"^[0-9]{6}$"
PHONE_PATTERN = r"^\+?[0-9][0-9\- ]{4,19}$"


class SendCodeRequest(BaseModel):
    """Request body for POST /send-code."""

    email: EmailStr


class SendCodeResponse(BaseModel):
    email: str
    expires_in: int


class InterviewApplicationCreate(BaseModel):
    """Request body for POST /apply."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20, pattern=PHONE_PATTERN)
    student_id: str = Field(..., min_length=1, max_length=50)
    major: str = Field(..., min_length=1, max_length=100)
    grade: str = Field(..., min_length=1, max_length=20)
    interview_time: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., pattern=CODE_PATTERN, description="6-digit email verification code")


class InterviewApplicationUpdate(BaseModel):
    """Request body for PUT /admin/applications/{id}."""

    status: InterviewStatus
    admin_remarks: str | None = Field(None, max_length=2000)


class InterviewApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    student_id: str
    major: str
    grade: str
    interview_time: str
    status: InterviewStatus
    admin_remarks: str | None = None
    created_at: datetime
    updated_at: datetime


class InterviewStats(BaseModel):
    """Application counts per status."""

    total: int = 0
    pending: int = 0
    interviewed: int = 0
    passed: int = 0
    rejected: int = 0
