"""Notifications module - per-user in-app messages."""

from .router import router

__all__ = ["router"]
