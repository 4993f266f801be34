"""Lab applications module - students applying to labs, admins deciding."""

from .router import admin_router, router

__all__ = ["router", "admin_router"]
