"""
Verification module - one-time email codes gating interview applications.
"""

from lab_recruitment.modules.verification.service import (
    EmailDeliveryError,
    VerificationCodeRegistry,
    VerificationServiceError,
    get_verification_registry,
)
from lab_recruitment.modules.verification.store import (
    InMemoryCodeStore,
    RedisCodeStore,
    VerificationEntry,
)

__all__ = [
    "EmailDeliveryError",
    "InMemoryCodeStore",
    "RedisCodeStore",
    "VerificationCodeRegistry",
    "VerificationEntry",
    "VerificationServiceError",
    "get_verification_registry",
]
