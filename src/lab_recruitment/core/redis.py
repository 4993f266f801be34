"""
Redis Connection

Holds the process-wide async client used by the verification code store.
Redis is required in production; elsewhere the API runs without it and
codes fall back to process memory.
"""

import logging

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from lab_recruitment.core.config import settings

logger = logging.getLogger(__name__)

REDIS_TIMEOUT_SECONDS = 5

_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Connect and publish the shared client once a PING succeeds.

    Raises:
        RedisError/OSError: If the server cannot be reached
    """
    global _client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=REDIS_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_TIMEOUT_SECONDS,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    _client = client
    return _client


async def get_redis() -> Redis | None:
    """FastAPI dependency: the shared client, or None when not connected."""
    return _client


def is_redis_available() -> bool:
    return _client is not None


async def ping_redis() -> bool:
    """Round-trip check for readiness probes."""
    if _client is None:
        return False
    try:
        return bool(await _client.ping())
    except (RedisError, OSError) as e:
        logger.error(f"Redis ping failed: {e}")
        return False


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
