"""
Shared fixtures for the lab recruitment API tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from lab_recruitment.modules.interview_applications.models import (
    InterviewApplication,
    InterviewStatus,
)
from lab_recruitment.modules.interview_applications.schemas import InterviewApplicationCreate
from lab_recruitment.modules.verification import InMemoryCodeStore, VerificationCodeRegistry


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.getdel = AsyncMock(return_value=None)
    redis.delete = AsyncMock(return_value=1)
    return redis


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def code_sender():
    """Email sender stub that reports success."""
    return AsyncMock(return_value=True)


@pytest.fixture
def code_store():
    return InMemoryCodeStore()


@pytest.fixture
def registry(code_store, code_sender, clock):
    return VerificationCodeRegistry(
        code_store,
        sender=code_sender,
        clock=clock,
        ttl=timedelta(minutes=5),
    )


@pytest.fixture
def sample_application_create():
    """Valid interview application request with a placeholder code."""
    return InterviewApplicationCreate(
        name="Lin Wei",
        email="Lin.Wei@Example.edu",
        phone="13800138000",
        student_id="2023001234",
        major="Computer Science",
        grade="2023",
        interview_time="Saturday morning",
        code="123456",
    )


@pytest.fixture
def sample_application_model():
    """Persisted interview application."""
    now = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
    return InterviewApplication(
        id=1,
        name="Lin Wei",
        email="lin.wei@example.edu",
        phone="13800138000",
        student_id="2023001234",
        major="Computer Science",
        grade="2023",
        interview_time="Saturday morning",
        status=InterviewStatus.PENDING,
        admin_remarks=None,
        created_at=now,
        updated_at=now,
    )
