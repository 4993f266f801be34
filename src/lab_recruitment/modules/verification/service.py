"""
Verification Code Registry

Issues and consumes email verification codes.

Rules:
- A code is a uniformly random 6-digit string, zero padded
- One live code per email; a new request replaces the old code
- A code is valid for VERIFICATION_CODE_TTL_SECONDS (5 minutes by default)
- Every verification attempt deletes the entry, so a code is single use
  and a wrong guess also burns it
- Missing, expired and mismatched codes are all reported as False
- If the code email cannot be sent, the entry is removed and
  EmailDeliveryError is raised; there is no retry

A bypass code can be configured for local testing. It is honored only when
the environment is development and never in production or staging.
"""

import hmac
import logging
import os
import secrets
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

from fastapi import Depends
from redis.asyncio import Redis

from lab_recruitment.core.config import settings
from lab_recruitment.core.email import send_verification_code
from lab_recruitment.core.redis import get_redis
from lab_recruitment.modules.verification.store import (
    CodeStore,
    InMemoryCodeStore,
    RedisCodeStore,
    VerificationEntry,
)

logger = logging.getLogger(__name__)

CODE_DIGITS = 6

Clock = Callable[[], datetime]
CodeSender = Callable[[str, str, int], Awaitable[bool]]


def utc_now() -> datetime:
    return datetime.now(UTC)


class VerificationServiceError(Exception):
    """Base exception for verification errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EmailDeliveryError(VerificationServiceError):
    """Raised when the verification email could not be sent."""

    def __init__(self):
        super().__init__(
            message="Failed to send the verification email. Please try again later.",
            error_code="EMAIL_DELIVERY_FAILED",
            status_code=500,
        )


def generate_code() -> str:
    """Return a uniformly random zero-padded 6-digit code."""
    return f"{secrets.randbelow(10**CODE_DIGITS):0{CODE_DIGITS}d}"


def _normalize(email: str) -> str:
    return email.strip().lower()


def _codes_equal(expected: str, submitted: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), submitted.encode("utf-8"))


class VerificationCodeRegistry:
    """
    Issues, stores and consumes one-time codes keyed by email.

    Args:
        store: Backing CodeStore
        sender: Coroutine delivering (email, code, ttl_minutes); returns success
        clock: Returns the current aware datetime; injectable for tests
        ttl: Code lifetime
        bypass_code: Code accepted for any email without touching the store
    """

    def __init__(
        self,
        store: CodeStore,
        sender: CodeSender = send_verification_code,
        clock: Clock = utc_now,
        ttl: timedelta | None = None,
        bypass_code: str | None = None,
    ) -> None:
        self._store = store
        self._sender = sender
        self._clock = clock
        self._ttl = ttl or timedelta(seconds=settings.verification_code_ttl_seconds)
        self._bypass_code = bypass_code or None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def issue_code(self, email: str) -> str:
        """
        Generate, store and email a new code for the address.

        Raises:
            EmailDeliveryError: If sending fails; the stored entry is rolled back
        """
        email = _normalize(email)
        code = generate_code()
        entry = VerificationEntry(code=code, expires_at=self._clock() + self._ttl)
        await self._store.put(email, entry, self._ttl)

        ttl_minutes = max(int(self._ttl.total_seconds()) // 60, 1)
        try:
            sent = await self._sender(email, code, ttl_minutes)
        except Exception as e:
            logger.error(f"Verification email raised for {email}: {e}")
            sent = False

        if not sent:
            await self._store.delete(email)
            logger.error(f"Verification code rolled back for {email}: email not sent")
            raise EmailDeliveryError()

        logger.info(f"Verification code issued for {email}")
        return code

    async def verify_and_consume(self, email: str, code: str) -> bool:
        """
        Check a submitted code and burn the stored entry.

        Returns:
            True only if an entry exists, matches, and has not expired
        """
        email = _normalize(email)

        if self._bypass_code and _codes_equal(code, self._bypass_code):
            logger.warning(f"SECURITY: Verification bypass code used for {email}")
            return True

        entry = await self._store.take(email)
        if entry is None:
            logger.info(f"Verification failed for {email}: no outstanding code")
            return False

        if self._clock() >= entry.expires_at:
            logger.info(f"Verification failed for {email}: code expired")
            return False

        if not _codes_equal(entry.code, code):
            logger.info(f"Verification failed for {email}: code mismatch")
            return False

        return True

    async def revoke(self, email: str) -> None:
        await self._store.delete(_normalize(email))


def _is_bypass_allowed() -> bool:
    """
    Decide whether the configured bypass code may be honored.

    Requires all of:
    1. VERIFICATION_BYPASS_CODE is set
    2. settings.is_development is True and settings.is_production is False
    3. The PYTHON_ENV environment variable is not production or staging
    """
    if not settings.verification_bypass_code:
        return False

    env_var = os.getenv("PYTHON_ENV", "").lower()
    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var != "production"
        and env_var != "staging"
    )

    if is_safe:
        logger.warning(
            "SECURITY: Verification bypass code is ENABLED. This MUST NOT be used in production!"
        )
    else:
        logger.error("VERIFICATION_BYPASS_CODE is set outside development and will be ignored")

    return is_safe


# Fallback store when Redis is not connected (development only)
_memory_store = InMemoryCodeStore()
_BYPASS_CODE = settings.verification_bypass_code if _is_bypass_allowed() else None


async def get_verification_registry(
    redis: Redis | None = Depends(get_redis),
) -> VerificationCodeRegistry:
    """FastAPI dependency returning a registry backed by Redis when available."""
    store: CodeStore = RedisCodeStore(redis) if redis is not None else _memory_store
    return VerificationCodeRegistry(store, bypass_code=_BYPASS_CODE)
