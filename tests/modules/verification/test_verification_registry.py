"""
Unit tests for the verification code registry and its stores.

These tests cover:
- Code format
- Single use and burn-on-failure semantics
- Expiry
- Rollback when the code email cannot be sent
- Concurrent verification of the same code
- Redis-backed storage
"""

import asyncio
import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from lab_recruitment.modules.verification import (
    EmailDeliveryError,
    InMemoryCodeStore,
    RedisCodeStore,
    VerificationCodeRegistry,
    VerificationEntry,
)
from lab_recruitment.modules.verification import service as verification_service
from lab_recruitment.modules.verification.service import generate_code

EMAIL = "student@example.edu"


class TestGenerateCode:
    def test_code_is_six_digits(self):
        for _ in range(200):
            code = generate_code()
            assert len(code) == 6
            assert code.isdigit()

    def test_codes_vary(self):
        codes = {generate_code() for _ in range(50)}
        assert len(codes) > 1


class TestIssueCode:
    @pytest.mark.asyncio
    async def test_issue_stores_and_sends(self, registry, code_store, code_sender):
        """The code is stored under the normalized email and emailed."""
        code = await registry.issue_code("Student@Example.edu ")

        assert EMAIL in code_store
        code_sender.assert_awaited_once_with(EMAIL, code, 5)

    @pytest.mark.asyncio
    async def test_new_code_replaces_previous(self, registry, code_store):
        await registry.issue_code(EMAIL)
        second = await registry.issue_code(EMAIL)

        assert len(code_store) == 1
        entry = await code_store.take(EMAIL)
        assert entry.code == second

    @pytest.mark.asyncio
    async def test_send_failure_rolls_back(self, code_store, clock):
        """A failed send leaves no entry behind."""
        sender = AsyncMock(return_value=False)
        registry = VerificationCodeRegistry(code_store, sender=sender, clock=clock)

        with pytest.raises(EmailDeliveryError) as exc_info:
            await registry.issue_code(EMAIL)

        assert exc_info.value.status_code == 500
        assert exc_info.value.error_code == "EMAIL_DELIVERY_FAILED"
        assert EMAIL not in code_store

    @pytest.mark.asyncio
    async def test_sender_exception_rolls_back(self, code_store, clock):
        sender = AsyncMock(side_effect=ConnectionError("smtp down"))
        registry = VerificationCodeRegistry(code_store, sender=sender, clock=clock)

        with pytest.raises(EmailDeliveryError):
            await registry.issue_code(EMAIL)

        assert len(code_store) == 0


class TestVerifyAndConsume:
    @pytest.mark.asyncio
    async def test_correct_code_verifies_once(self, registry):
        code = await registry.issue_code(EMAIL)

        assert await registry.verify_and_consume(EMAIL, code) is True
        assert await registry.verify_and_consume(EMAIL, code) is False

    @pytest.mark.asyncio
    async def test_email_match_is_case_insensitive(self, registry):
        code = await registry.issue_code(EMAIL)

        assert await registry.verify_and_consume("STUDENT@example.edu", code) is True

    @pytest.mark.asyncio
    async def test_wrong_code_burns_entry(self, registry, code_store):
        """A wrong guess deletes the entry, so the right code no longer works."""
        code = await registry.issue_code(EMAIL)
        wrong = "000000" if code != "000000" else "111111"

        assert await registry.verify_and_consume(EMAIL, wrong) is False
        assert EMAIL not in code_store
        assert await registry.verify_and_consume(EMAIL, code) is False

    @pytest.mark.asyncio
    async def test_unknown_email_fails(self, registry):
        assert await registry.verify_and_consume("nobody@example.edu", "123456") is False

    @pytest.mark.asyncio
    async def test_code_valid_just_before_expiry(self, registry, clock):
        code = await registry.issue_code(EMAIL)
        clock.advance(minutes=4, seconds=59)

        assert await registry.verify_and_consume(EMAIL, code) is True

    @pytest.mark.asyncio
    async def test_code_expires_at_ttl(self, registry, clock):
        code = await registry.issue_code(EMAIL)
        clock.advance(minutes=5)

        assert await registry.verify_and_consume(EMAIL, code) is False

    @pytest.mark.asyncio
    async def test_expired_code_is_removed(self, registry, code_store, clock):
        code = await registry.issue_code(EMAIL)
        clock.advance(minutes=6)

        assert await registry.verify_and_consume(EMAIL, code) is False
        assert EMAIL not in code_store

    @pytest.mark.asyncio
    async def test_concurrent_verification_single_success(self, registry):
        """Only one of many simultaneous attempts with the right code succeeds."""
        code = await registry.issue_code(EMAIL)

        results = await asyncio.gather(
            *[registry.verify_and_consume(EMAIL, code) for _ in range(20)]
        )

        assert results.count(True) == 1

    @pytest.mark.asyncio
    async def test_bypass_code_skips_store(self, code_store, code_sender, clock):
        registry = VerificationCodeRegistry(
            code_store, sender=code_sender, clock=clock, bypass_code="999999"
        )

        assert await registry.verify_and_consume(EMAIL, "999999") is True
        assert await registry.verify_and_consume(EMAIL, "123456") is False

    @pytest.mark.asyncio
    async def test_revoke_removes_code(self, registry):
        code = await registry.issue_code(EMAIL)
        await registry.revoke(EMAIL)

        assert await registry.verify_and_consume(EMAIL, code) is False


class TestInMemoryCodeStore:
    @pytest.mark.asyncio
    async def test_take_removes_entry(self):
        store = InMemoryCodeStore()
        entry = VerificationEntry(code="123456", expires_at=datetime.now(UTC))

        await store.put(EMAIL, entry, timedelta(minutes=5))

        assert await store.take(EMAIL) == entry
        assert await store.take(EMAIL) is None


class TestRedisCodeStore:
    @pytest.mark.asyncio
    async def test_put_sets_key_with_expiry(self, mock_redis):
        store = RedisCodeStore(mock_redis)
        expires_at = datetime(2026, 3, 1, 9, 5, tzinfo=UTC)

        await store.put(EMAIL, VerificationEntry("123456", expires_at), timedelta(minutes=5))

        mock_redis.set.assert_awaited_once()
        args, kwargs = mock_redis.set.call_args
        assert args[0] == f"verification_code:{EMAIL}"
        assert json.loads(args[1]) == {"code": "123456", "expires_at": expires_at.isoformat()}
        assert kwargs["ex"] == 300

    @pytest.mark.asyncio
    async def test_take_uses_getdel(self, mock_redis):
        expires_at = datetime(2026, 3, 1, 9, 5, tzinfo=UTC)
        mock_redis.getdel = AsyncMock(
            return_value=json.dumps({"code": "654321", "expires_at": expires_at.isoformat()})
        )
        store = RedisCodeStore(mock_redis)

        entry = await store.take(EMAIL)

        mock_redis.getdel.assert_awaited_once_with(f"verification_code:{EMAIL}")
        assert entry == VerificationEntry(code="654321", expires_at=expires_at)

    @pytest.mark.asyncio
    async def test_take_missing_returns_none(self, mock_redis):
        store = RedisCodeStore(mock_redis)

        assert await store.take(EMAIL) is None

    @pytest.mark.asyncio
    async def test_malformed_entry_is_discarded(self, mock_redis):
        mock_redis.getdel = AsyncMock(return_value="not-json")
        store = RedisCodeStore(mock_redis)

        assert await store.take(EMAIL) is None

    @pytest.mark.asyncio
    async def test_registry_over_redis_store(self, mock_redis, code_sender, clock):
        """Issue then verify through Redis, with SET/GETDEL simulated."""
        saved: dict[str, str] = {}

        async def fake_set(key, value, ex=None):
            saved[key] = value
            return True

        async def fake_getdel(key):
            return saved.pop(key, None)

        mock_redis.set = AsyncMock(side_effect=fake_set)
        mock_redis.getdel = AsyncMock(side_effect=fake_getdel)
        registry = VerificationCodeRegistry(
            RedisCodeStore(mock_redis), sender=code_sender, clock=clock
        )

        code = await registry.issue_code(EMAIL)

        assert await registry.verify_and_consume(EMAIL, code) is True
        assert await registry.verify_and_consume(EMAIL, code) is False


class TestBypassGate:
    """The bypass code is honored only in development."""

    @pytest.fixture
    def bypass_settings(self, monkeypatch):
        monkeypatch.setattr(verification_service.settings, "verification_bypass_code", "999999")
        monkeypatch.setattr(verification_service.settings, "python_env", "development")
        monkeypatch.delenv("PYTHON_ENV", raising=False)
        return verification_service.settings

    def test_allowed_in_development(self, bypass_settings):
        assert verification_service._is_bypass_allowed() is True

    def test_rejected_in_production(self, bypass_settings, monkeypatch):
        monkeypatch.setattr(bypass_settings, "python_env", "production")

        assert verification_service._is_bypass_allowed() is False

    def test_rejected_when_environment_says_staging(self, bypass_settings, monkeypatch):
        monkeypatch.setenv("PYTHON_ENV", "staging")

        assert verification_service._is_bypass_allowed() is False

    def test_rejected_when_environment_says_production(self, bypass_settings, monkeypatch):
        monkeypatch.setenv("PYTHON_ENV", "Production")

        assert verification_service._is_bypass_allowed() is False

    def test_no_code_configured(self, bypass_settings, monkeypatch):
        monkeypatch.setattr(bypass_settings, "verification_bypass_code", "")

        assert verification_service._is_bypass_allowed() is False
