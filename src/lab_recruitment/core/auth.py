"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
This module handles bearer token validation and role-based access control
using the security utilities defined in security.py.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lab_recruitment.core.security import decode_token

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# Missing credentials are reported as 401 by get_current_user, not by the scheme
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Represents an authenticated user, populated from JWT claims.

    Attributes:
        id: User's database id
        email: User's email address (the token subject)
        role: 'student' or 'admin'
        username: Display name (optional)
    """

    id: int
    email: str
    role: str
    username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_access_token(token: str) -> CurrentUser:
    """
    Validate an access token and extract the user claims.

    Args:
        token: JWT string from the Authorization header

    Returns:
        CurrentUser built from the token claims

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong
            type, or missing required claims
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        return CurrentUser(
            id=int(payload["uid"]),
            email=payload["sub"],
            role=payload.get("role", ""),
            username=payload.get("username"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency that validates the bearer token and returns the user.

    Raises:
        HTTPException 401: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("MISSING_TOKEN", "Authentication required.")

    return validate_access_token(credentials.credentials)


async def get_current_admin_user(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    FastAPI dependency restricting an endpoint to admins.

    Usage:
        @router.get("/admin/endpoint")
        async def admin_endpoint(admin: CurrentUser = Depends(get_current_admin_user)):
            ...

    Raises:
        HTTPException 401: If token is missing, invalid, or expired
        HTTPException 403: If the user is not an admin
    """
    if not user.is_admin:
        logger.warning(
            f"Access denied: User {user.id} ({user.email}) has role '{user.role}', "
            f"but '{ADMIN_ROLE}' is required"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ADMIN_ACCESS_REQUIRED",
                "message": "Admin access is required for this endpoint.",
            },
        )

    logger.debug(f"Authenticated admin: {user.id} ({user.email})")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser | None:
    """
    Optional authentication dependency.

    Returns the user if a valid token is provided, or None otherwise.
    """
    if credentials is None:
        return None

    try:
        return validate_access_token(credentials.credentials)
    except HTTPException:
        return None


__all__ = [
    "ADMIN_ROLE",
    "CurrentUser",
    "get_current_admin_user",
    "get_current_user",
    "get_optional_user",
    "validate_access_token",
]
