"""
Interview Applications Module

Handles the interview application workflow:
1. Applicant requests a verification code by email
2. Applicant submits the application with the code
3. Admins list, review, update and delete applications
"""

from .admin_router import router as admin_router
from .router import router

__all__ = ["router", "admin_router"]
