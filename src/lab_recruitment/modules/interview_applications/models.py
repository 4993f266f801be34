"""
Interview Application Models

A prospective member's request for an interview. Submitted without an
account, gated by an emailed verification code.
"""

import enum

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.modules.shared import BaseModel


class InterviewStatus(str, enum.Enum):
    """
    Review status of an interview application.

    Admins may set any status at any time; no ordering is enforced.
    """

    PENDING = "pending"
    INTERVIEWED = "interviewed"
    PASSED = "passed"
    REJECTED = "rejected"


class InterviewApplication(BaseModel):
    """
    Interview application.

    At most one live application per email, enforced by a lookup before
    insert (email is indexed but not unique).
    """

    __tablename__ = "interview_applications"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    student_id: Mapped[str] = mapped_column(String(50), nullable=False)
    major: Mapped[str] = mapped_column(String(100), nullable=False)
    grade: Mapped[str] = mapped_column(String(20), nullable=False)
    interview_time: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[InterviewStatus] = mapped_column(
        ENUM(
            InterviewStatus,
            name="interview_status",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=InterviewStatus.PENDING,
        index=True,
    )
    admin_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<InterviewApplication(id={self.id}, email={self.email}, status={self.status})>"
