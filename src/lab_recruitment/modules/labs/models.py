"""
Lab Models

Labs recruiting members. Students apply to a lab through lab applications.
"""

import enum

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.modules.shared import BaseModel


class LabStatus(str, enum.Enum):
    """Only active labs accept applications."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Lab(BaseModel):
    """Lab with a member capacity."""

    __tablename__ = "labs"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Capacity
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    current_members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Contact
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Presentation, tags stored as a JSON array of strings
    tags: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    cover_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[LabStatus] = mapped_column(
        ENUM(
            LabStatus,
            name="lab_status",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=LabStatus.ACTIVE,
    )

    # ON DELETE RESTRICT: labs keep their creator
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Lab(id={self.id}, name={self.name}, status={self.status})>"

    @property
    def is_full(self) -> bool:
        return self.current_members >= self.max_members

    @property
    def available_slots(self) -> int:
        return max(self.max_members - self.current_members, 0)
