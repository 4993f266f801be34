"""
User Models

Database models for user accounts and authentication.
"""

from enum import Enum

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.modules.shared import BaseModel


class UserRole(str, Enum):
    """User roles in the system."""

    STUDENT = "student"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """Account status. Only active accounts may log in."""

    ACTIVE = "active"
    INACTIVE = "inactive"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class User(BaseModel):
    """
    User model for authentication and authorization.

    Email and username are unique. Uniqueness is checked by the service
    before writes and backed by unique indexes.
    """

    __tablename__ = "users"

    # Authentication fields
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Role and status
    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True, values_callable=_enum_values),
        nullable=False,
        default=UserRole.STUDENT,
    )
    status: Mapped[UserStatus] = mapped_column(
        ENUM(UserStatus, name="user_status", create_type=True, values_callable=_enum_values),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    # Profile fields
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    student_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    major: Mapped[str | None] = mapped_column(String(100), nullable=True)
    grade: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
