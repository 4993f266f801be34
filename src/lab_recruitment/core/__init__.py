"""
Core module - Configuration, database, security, and utilities.
"""

from lab_recruitment.core.config import get_settings, settings
from lab_recruitment.core.database import Base, close_db, get_db, init_db
from lab_recruitment.core.redis import close_redis, get_redis, init_redis
from lab_recruitment.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
