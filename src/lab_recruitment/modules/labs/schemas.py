"""Lab schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from lab_recruitment.modules.labs.models import LabStatus


class LabCreate(BaseModel):
    """Request body for POST /labs."""

    name: str = Field(..., min_length=2, max_length=100)
    description: str | None = None
    requirements: str | None = None
    max_members: int = Field(10, ge=1, le=100)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=200)
    tags: list[str] | None = Field(None, max_length=20)
    cover_image: str | None = Field(None, max_length=500)


class LabUpdate(BaseModel):
    """Request body for PUT /labs/{id}; omitted fields are unchanged."""

    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = None
    requirements: str | None = None
    max_members: int | None = Field(None, ge=1, le=100)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=200)
    tags: list[str] | None = Field(None, max_length=20)
    cover_image: str | None = Field(None, max_length=500)
    status: LabStatus | None = None

    @model_validator(mode="after")
    def at_least_one_field(self) -> "LabUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class LabResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    requirements: str | None = None
    max_members: int
    current_members: int
    available_slots: int
    is_full: bool
    contact_email: str | None = None
    contact_phone: str | None = None
    location: str | None = None
    tags: list[str] | None = None
    cover_image: str | None = None
    status: LabStatus
    created_by: int
    created_at: datetime
    updated_at: datetime
