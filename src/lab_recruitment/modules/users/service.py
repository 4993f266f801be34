"""
User Service Layer

Credential store operations: registration, authentication, password change
and profile updates.

Uniqueness of username and email is checked explicitly before writes.
There is no lockout: every failed login is independent of previous ones.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.security import hash_password, verify_password
from lab_recruitment.modules.users.models import User, UserRole
from lab_recruitment.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("username",)


class UserServiceError(Exception):
    """Base exception for user service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    """Raised when no user matches the lookup."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND", status_code=404)


class InvalidCredentialsError(UserServiceError):
    """Raised when a password does not match the stored hash."""

    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS", status_code=401)


class AccountInactiveError(UserServiceError):
    """Raised when an inactive account tries to authenticate."""

    def __init__(self):
        super().__init__(
            message="Your account has been deactivated.",
            error_code="ACCOUNT_INACTIVE",
            status_code=403,
        )


class EmailAlreadyExistsError(UserServiceError):
    def __init__(self):
        super().__init__(
            message="This email is already registered.",
            error_code="EMAIL_EXISTS",
            status_code=409,
        )


class UsernameAlreadyExistsError(UserServiceError):
    def __init__(self):
        super().__init__(
            message="This username is already taken.",
            error_code="USERNAME_EXISTS",
            status_code=409,
        )


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def register(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    phone: str | None = None,
    student_id: str | None = None,
    major: str | None = None,
    grade: str | None = None,
) -> User:
    """
    Register a new student account.

    Self-registration always creates a student; admins are seeded.

    Raises:
        UsernameAlreadyExistsError: If the username is taken
        EmailAlreadyExistsError: If the email is registered
    """
    email = normalize_email(email)

    if await UserRepository.username_exists(db, username):
        logger.warning(f"Registration rejected, username taken: {username}")
        raise UsernameAlreadyExistsError()

    if await UserRepository.email_exists(db, email):
        logger.warning(f"Registration rejected, email registered: {email}")
        raise EmailAlreadyExistsError()

    user = await UserRepository.create(
        db,
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=UserRole.STUDENT,
        phone=phone,
        student_id=student_id,
        major=major,
        grade=grade,
    )
    logger.info(f"User registered: {user.id} ({user.email})")
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Authenticate a user by email and password.

    Args:
        db: Database session
        email: Login email
        password: Plain password, compared against the bcrypt hash

    Returns:
        The authenticated User

    Raises:
        UserNotFoundError: If no user has this email
        InvalidCredentialsError: If the password does not match
        AccountInactiveError: If the account is inactive
    """
    email = normalize_email(email)
    user = await UserRepository.get_by_email(db, email)

    if user is None:
        logger.warning(f"Login attempt for non-existent email: {email}")
        raise UserNotFoundError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user: {email}")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {email}")
        raise AccountInactiveError()

    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def change_password(
    db: AsyncSession,
    user_id: int,
    old_password: str,
    new_password: str,
) -> None:
    """
    Replace a user's password after re-verifying the current one.

    Raises:
        UserNotFoundError: If the user does not exist
        InvalidCredentialsError: If old_password does not match
    """
    user = await get_user(db, user_id)

    if not verify_password(old_password, user.password_hash):
        logger.warning(f"Password change rejected for user {user_id}: wrong current password")
        raise InvalidCredentialsError("Current password is incorrect.")

    user.password_hash = hash_password(new_password)
    await UserRepository.save(db, user)
    logger.info(f"Password changed for user {user_id}")


async def update_profile(db: AsyncSession, user_id: int, changes: dict) -> User:
    """
    Apply profile changes. Only keys present in ``changes`` are written.

    Raises:
        UserNotFoundError: If the user does not exist
        UsernameAlreadyExistsError: If the new username belongs to someone else
    """
    user = await get_user(db, user_id)
    changes = {
        field: value
        for field, value in changes.items()
        if value is not None or field not in REQUIRED_FIELDS
    }

    username = changes.get("username")
    if username and username != user.username:
        if await UserRepository.username_exists(db, username, exclude_user_id=user.id):
            raise UsernameAlreadyExistsError()

    for field, value in changes.items():
        setattr(user, field, value)

    user = await UserRepository.save(db, user)
    logger.info(f"Profile updated for user {user_id}: {sorted(changes)}")
    return user
