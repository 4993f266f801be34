"""Authentication module."""

from lab_recruitment.modules.auth.router import router
from lab_recruitment.modules.auth.schemas import LoginRequest, LoginResponse, TokenResponse

__all__ = ["router", "LoginRequest", "LoginResponse", "TokenResponse"]
