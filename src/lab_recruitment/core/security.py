"""
Security Utilities

Password hashing (bcrypt) and JWT issuance/validation (PyJWT, HS256).

Tokens are stateless: a token is accepted only if its signature verifies
against the server secret and its ``exp`` claim is in the future. There is
no server-side table of issued tokens.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from lab_recruitment.core.config import settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the input
BCRYPT_MAX_BYTES = 72


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a per-password random salt."""
    return bcrypt.hashpw(_encode_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode_password(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _encode(claims: dict[str, Any]) -> str:
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: Token subject (the user's email)
        additional_claims: Extra claims, e.g. ``uid`` and ``role``
        expires_delta: Lifetime override; defaults to JWT_EXPIRE_MINUTES
        now: Issue time override (tests)

    Returns:
        Encoded JWT string
    """
    issued_at = now or datetime.now(UTC)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))

    claims: dict[str, Any] = dict(additional_claims or {})
    claims.update(
        {
            "sub": subject,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expire,
            "iss": settings.jwt_issuer,
            "type": "access",
        }
    )
    return _encode(claims)


def create_refresh_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a longer-lived refresh token carrying only the subject."""
    issued_at = datetime.now(UTC)
    expire = issued_at + (expires_delta or timedelta(days=settings.jwt_refresh_expire_days))
    return _encode(
        {
            "sub": subject,
            "iat": issued_at,
            "exp": expire,
            "iss": settings.jwt_issuer,
            "type": "refresh",
        }
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Returns:
        The claims dict, or None when the token is malformed, its signature
        does not verify, it was issued by someone else, or it has expired.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected invalid token: {e}")
        return None
