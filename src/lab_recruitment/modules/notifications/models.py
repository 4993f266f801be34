"""
Notification Models

In-app messages for a single user.
"""

import enum

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.modules.shared import BaseModel


class NotificationType(str, enum.Enum):
    SYSTEM = "system"
    APPLICATION = "application"
    LAB = "lab"


class Notification(BaseModel):
    """A notification addressed to one user, optionally pointing at a related row."""

    __tablename__ = "notifications"

    # ON DELETE CASCADE: notifications go with their user
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        ENUM(
            NotificationType,
            name="notification_type",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=NotificationType.SYSTEM,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    related_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type})>"
