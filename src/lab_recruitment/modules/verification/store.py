"""
Verification Code Stores

Keyed storage for outstanding one-time codes, one entry per email.

``take`` is the only read and it always removes the entry, so two
concurrent verifications can never both see the same code:
- InMemoryCodeStore guards its dict with an asyncio.Lock
- RedisCodeStore uses the atomic GETDEL command
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationEntry:
    code: str
    expires_at: datetime


class CodeStore(Protocol):
    async def put(self, email: str, entry: VerificationEntry, ttl: timedelta) -> None:
        """Store an entry, replacing any previous one for the email."""

    async def take(self, email: str) -> VerificationEntry | None:
        """Atomically return and delete the entry for the email."""

    async def delete(self, email: str) -> None:
        """Drop the entry for the email, if any."""


class InMemoryCodeStore:
    """Process-local store. Used in development and tests."""

    def __init__(self) -> None:
        self._entries: dict[str, VerificationEntry] = {}
        self._lock = asyncio.Lock()

    async def put(self, email: str, entry: VerificationEntry, ttl: timedelta) -> None:
        async with self._lock:
            self._entries[email] = entry

    async def take(self, email: str) -> VerificationEntry | None:
        async with self._lock:
            return self._entries.pop(email, None)

    async def delete(self, email: str) -> None:
        async with self._lock:
            self._entries.pop(email, None)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, email: str) -> bool:
        return email in self._entries


class RedisCodeStore:
    """Redis-backed store shared by every API process."""

    KEY_PREFIX = "verification_code:"

    def __init__(self, client: Redis) -> None:
        self._client = client

    def _key(self, email: str) -> str:
        return f"{self.KEY_PREFIX}{email}"

    async def put(self, email: str, entry: VerificationEntry, ttl: timedelta) -> None:
        payload = json.dumps({"code": entry.code, "expires_at": entry.expires_at.isoformat()})
        # Redis expiry only reclaims memory; validity is decided by expires_at
        await self._client.set(self._key(email), payload, ex=max(int(ttl.total_seconds()), 1))

    async def take(self, email: str) -> VerificationEntry | None:
        raw = await self._client.getdel(self._key(email))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return VerificationEntry(
                code=data["code"],
                expires_at=datetime.fromisoformat(data["expires_at"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Discarding malformed verification entry for {email}: {e}")
            return None

    async def delete(self, email: str) -> None:
        await self._client.delete(self._key(email))
