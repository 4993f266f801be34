"""initial schema

Revision ID: a7c3e91d2b40
Revises:
Create Date: 2026-10-19 10:00:00.000000

This migration:
1. Creates the enum types used by every table
2. Creates users, labs, interview_applications, applications and notifications

Tables are created in foreign key order: users first, then labs, then the
tables that reference both.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c3e91d2b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


ENUMS = {
    "user_role": ("student", "admin"),
    "user_status": ("active", "inactive"),
    "lab_status": ("active", "inactive"),
    "interview_status": ("pending", "interviewed", "passed", "rejected"),
    "lab_application_status": ("pending", "accepted", "rejected"),
    "notification_type": ("system", "application", "lab"),
}


def _enum(name: str) -> postgresql.ENUM:
    # Created explicitly in upgrade() with checkfirst
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create enum types and all tables."""
    bind = op.get_bind()
    for name in ENUMS:
        _enum(name).create(bind, checkfirst=True)

    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", _enum("user_role"), nullable=False, server_default="student"),
        sa.Column("status", _enum("user_status"), nullable=False, server_default="active"),
        sa.Column("avatar", sa.String(length=500), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("student_id", sa.String(length=50), nullable=True),
        sa.Column("major", sa.String(length=100), nullable=True),
        sa.Column("grade", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_deleted_at"), "users", ["deleted_at"], unique=False)

    # Labs
    op.create_table(
        "labs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("current_members", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=20), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("tags", postgresql.JSONB(), nullable=True),
        sa.Column("cover_image", sa.String(length=500), nullable=True),
        sa.Column("status", _enum("lab_status"), nullable=False, server_default="active"),
        sa.Column("created_by", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["created_by"],
            ["users.id"],
            name="fk_labs_created_by",
            ondelete="RESTRICT",
        ),
    )
    op.create_index(op.f("ix_labs_name"), "labs", ["name"], unique=False)
    op.create_index(op.f("ix_labs_created_by"), "labs", ["created_by"], unique=False)
    op.create_index(op.f("ix_labs_deleted_at"), "labs", ["deleted_at"], unique=False)

    # Interview applications (no account required)
    op.create_table(
        "interview_applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("student_id", sa.String(length=50), nullable=False),
        sa.Column("major", sa.String(length=100), nullable=False),
        sa.Column("grade", sa.String(length=20), nullable=False),
        sa.Column("interview_time", sa.String(length=100), nullable=False),
        sa.Column(
            "status",
            _enum("interview_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("admin_remarks", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_interview_applications_email"),
        "interview_applications",
        ["email"],
        unique=False,
    )
    op.create_index(
        op.f("ix_interview_applications_status"),
        "interview_applications",
        ["status"],
        unique=False,
    )
    op.create_index(
        op.f("ix_interview_applications_deleted_at"),
        "interview_applications",
        ["deleted_at"],
        unique=False,
    )

    # Lab applications
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("lab_id", sa.Integer(), nullable=False),
        sa.Column("motivation", sa.Text(), nullable=False),
        sa.Column("skills", postgresql.JSONB(), nullable=True),
        sa.Column("experience", sa.Text(), nullable=True),
        sa.Column("available_time", sa.String(length=200), nullable=True),
        sa.Column("resume_url", sa.String(length=500), nullable=True),
        sa.Column(
            "status",
            _enum("lab_application_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.Integer(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_applications_user_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["lab_id"],
            ["labs.id"],
            name="fk_applications_lab_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["reviewed_by"],
            ["users.id"],
            name="fk_applications_reviewed_by",
            ondelete="SET NULL",
        ),
    )
    op.create_index(op.f("ix_applications_user_id"), "applications", ["user_id"], unique=False)
    op.create_index(op.f("ix_applications_lab_id"), "applications", ["lab_id"], unique=False)
    op.create_index(op.f("ix_applications_status"), "applications", ["status"], unique=False)
    op.create_index(
        op.f("ix_applications_deleted_at"), "applications", ["deleted_at"], unique=False
    )
    op.create_index("ix_applications_user_lab", "applications", ["user_id", "lab_id"])

    # Notifications
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "type",
            _enum("notification_type"),
            nullable=False,
            server_default="system",
        ),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("related_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_notifications_user_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_notifications_user_id"), "notifications", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_notifications_is_read"), "notifications", ["is_read"], unique=False
    )
    op.create_index(
        op.f("ix_notifications_deleted_at"), "notifications", ["deleted_at"], unique=False
    )


def downgrade() -> None:
    """Drop all tables, then the enum types."""
    op.drop_table("notifications")
    op.drop_index("ix_applications_user_lab", table_name="applications")
    op.drop_table("applications")
    op.drop_table("interview_applications")
    op.drop_table("labs")
    op.drop_table("users")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        _enum(name).drop(bind, checkfirst=True)
