"""
Lab Application Models

A registered student's application to join a specific lab.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.modules.shared import BaseModel


class LabApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class LabApplication(BaseModel):
    """
    Student application to a lab.

    One live application per (user, lab), checked before insert.
    """

    __tablename__ = "applications"
    __table_args__ = (Index("ix_applications_user_lab", "user_id", "lab_id"),)

    # ON DELETE CASCADE: applications go with their user or lab
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    lab_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Submission
    motivation: Mapped[str] = mapped_column(Text, nullable=False)
    skills: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    experience: Mapped[str | None] = mapped_column(Text, nullable=True)
    available_time: Mapped[str | None] = mapped_column(String(200), nullable=True)
    resume_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Review
    status: Mapped[LabApplicationStatus] = mapped_column(
        ENUM(
            LabApplicationStatus,
            name="lab_application_status",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=LabApplicationStatus.PENDING,
        index=True,
    )
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    # ON DELETE SET NULL: keep the decision if the reviewer account goes away
    reviewed_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<LabApplication(id={self.id}, user_id={self.user_id}, "
            f"lab_id={self.lab_id}, status={self.status})>"
        )

    @property
    def is_pending(self) -> bool:
        return self.status == LabApplicationStatus.PENDING
