"""
Users module - Accounts and credentials.
"""

from lab_recruitment.modules.users.models import User, UserRole, UserStatus
from lab_recruitment.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserStatus", "UserRepository"]
