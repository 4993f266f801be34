"""Lab application schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lab_recruitment.modules.lab_applications.models import LabApplicationStatus


class LabApplicationCreate(BaseModel):
    """Request body for POST /applications."""

    model_config = ConfigDict(str_strip_whitespace=True)

    lab_id: int = Field(..., ge=1)
    motivation: str = Field(..., min_length=10, max_length=2000)
    skills: list[str] | None = Field(None, max_length=30)
    experience: str | None = Field(None, max_length=2000)
    available_time: str | None = Field(None, max_length=200)
    resume_url: str | None = Field(None, max_length=500)


class LabApplicationReview(BaseModel):
    """Request body for the admin review endpoint."""

    status: LabApplicationStatus
    feedback: str | None = Field(None, max_length=2000)

    @field_validator("status")
    @classmethod
    def must_be_decision(cls, value: LabApplicationStatus) -> LabApplicationStatus:
        if value == LabApplicationStatus.PENDING:
            raise ValueError("status must be accepted or rejected")
        return value


class LabApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    lab_id: int
    motivation: str
    skills: list[str] | None = None
    experience: str | None = None
    available_time: str | None = None
    resume_url: str | None = None
    status: LabApplicationStatus
    feedback: str | None = None
    reviewed_by: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
