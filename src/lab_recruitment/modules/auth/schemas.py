"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from lab_recruitment.modules.users.models import UserRole, UserStatus

USERNAME_PATTERN = r"^[A-Za-z0-9_\-一-龥]+$"


class RegisterRequest(BaseModel):
    """Registration request schema."""

    username: str = Field(..., min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=64)
    phone: str | None = Field(None, max_length=20)
    student_id: str | None = Field(None, max_length=50)
    major: str | None = Field(None, max_length=100)
    grade: str | None = Field(None, max_length=20)


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=64)

    @model_validator(mode="after")
    def passwords_differ(self) -> "ChangePasswordRequest":
        if self.old_password == self.new_password:
            raise ValueError("New password must be different from the current password")
        return self


class UpdateProfileRequest(BaseModel):
    """Profile update; omitted fields are left unchanged."""

    username: str | None = Field(None, min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    avatar: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=20)
    student_id: str | None = Field(None, max_length=50)
    major: str | None = Field(None, max_length=100)
    grade: str | None = Field(None, max_length=20)


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: UserRole
    status: UserStatus
    avatar: str | None = None
    phone: str | None = None
    student_id: str | None = None
    major: str | None = None
    grade: str | None = None
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(TokenResponse):
    """Login response schema."""

    user: UserResponse
