"""
Shared Model Base

Abstract base for every table: integer primary key, managed timestamps and
a soft-delete marker. Soft-deleted rows keep their data but are excluded
from all repository reads.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from lab_recruitment.core.database import Base


class BaseModel(Base):
    """Abstract model with id, created_at, updated_at and deleted_at columns."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Mark the row as deleted; the caller commits."""
        self.deleted_at = datetime.now(UTC)
