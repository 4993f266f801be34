"""
User Repository

Database operations for user management. Soft-deleted users are invisible
to every lookup.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.modules.users.models import User, UserRole, UserStatus

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.STUDENT,
        status: UserStatus = UserStatus.ACTIVE,
        phone: str | None = None,
        student_id: str | None = None,
        major: str | None = None,
        grade: str | None = None,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            username: Unique display name
            email: Unique email address
            password_hash: bcrypt hash of the password
            role: User's role
            status: Account status
            phone, student_id, major, grade: Optional profile fields

        Returns:
            Created User instance
        """
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            status=status,
            phone=phone,
            student_id=student_id,
            major=major,
            grade=grade,
        )

        db.add(user)
        await db.commit()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(
            select(User).where(User.id == user_id, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        result = await db.execute(
            select(User).where(User.email == email, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username(db: AsyncSession, username: str) -> User | None:
        result = await db.execute(
            select(User).where(User.username == username, User.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def username_exists(
        db: AsyncSession, username: str, exclude_user_id: int | None = None
    ) -> bool:
        """
        Check if a username is taken.

        Args:
            db: Database session
            username: Username to check
            exclude_user_id: Ignore this user (profile updates keep their own name)
        """
        user = await UserRepository.get_by_username(db, username)
        if user is None:
            return False
        return user.id != exclude_user_id

    @staticmethod
    async def save(db: AsyncSession, user: User) -> User:
        """Persist pending changes on a user."""
        await db.commit()
        await db.refresh(user)
        return user
