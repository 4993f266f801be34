"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lab_recruitment.core.auth import CurrentUser, get_current_user
from lab_recruitment.core.config import settings
from lab_recruitment.core.database import get_db
from lab_recruitment.core.responses import ApiResponse, require_json
from lab_recruitment.core.security import create_access_token, create_refresh_token, decode_token
from lab_recruitment.modules.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from lab_recruitment.modules.users import service
from lab_recruitment.modules.users.models import User
from lab_recruitment.modules.users.repository import UserRepository
from lab_recruitment.modules.users.service import UserNotFoundError, UserServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS_DETAIL = {
    "error": "INVALID_CREDENTIALS",
    "message": "Invalid email or password.",
}


def _handle_service_error(e: UserServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


def _issue_tokens(user: User) -> TokenResponse:
    additional_claims = {
        "uid": user.id,
        "role": user.role.value,
        "username": user.username,
    }
    return TokenResponse(
        access_token=create_access_token(
            subject=user.email,
            additional_claims=additional_claims,
        ),
        refresh_token=create_refresh_token(subject=user.email),
        token_type="bearer",
        expires_in=settings.jwt_expire_minutes * 60,
    )


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json)],
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """
    Register a new student account.

    Raises:
        HTTPException 409: Username or email already in use
    """
    try:
        user = await service.register(
            db,
            username=data.username,
            email=data.email,
            password=data.password,
            phone=data.phone,
            student_id=data.student_id,
            major=data.major,
            grade=data.grade,
        )
    except UserServiceError as e:
        _handle_service_error(e)

    return ApiResponse(
        code=status.HTTP_201_CREATED,
        message="Registration successful",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    dependencies=[Depends(require_json)],
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[LoginResponse]:
    """
    Authenticate user and return JWT tokens.

    Unknown emails and wrong passwords produce the same 401 so the response
    does not reveal which accounts exist.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
    """
    try:
        user = await service.authenticate(db, credentials.email, credentials.password)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
        ) from e
    except UserServiceError as e:
        _handle_service_error(e)

    tokens = _issue_tokens(user)
    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return ApiResponse(
        message="Login successful",
        data=LoginResponse(
            **tokens.model_dump(),
            user=UserResponse.model_validate(user),
        ),
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    dependencies=[Depends(require_json)],
)
async def refresh(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TokenResponse]:
    """
    Exchange a refresh token for a new token pair.

    Raises:
        HTTPException 401: Invalid refresh token, or the account is gone or inactive
    """
    payload = decode_token(data.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_TOKEN",
                "message": "Invalid or expired refresh token.",
            },
        )

    user = await UserRepository.get_by_email(db, payload["sub"])
    if user is None or not user.is_active:
        logger.warning(f"Refresh rejected for {payload['sub']}: account missing or inactive")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "INVALID_TOKEN",
                "message": "Invalid or expired refresh token.",
            },
        )

    return ApiResponse(message="Token refreshed", data=_issue_tokens(user))


@router.post("/logout", response_model=ApiResponse[None])
async def logout(current_user: CurrentUser = Depends(get_current_user)) -> ApiResponse[None]:
    """Tokens are stateless; the client discards its copy."""
    logger.info(f"User logged out: {current_user.email}")
    return ApiResponse(message="Logout successful")


@router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    try:
        user = await service.get_user(db, current_user.id)
    except UserServiceError as e:
        _handle_service_error(e)

    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/profile",
    response_model=ApiResponse[UserResponse],
    dependencies=[Depends(require_json)],
)
async def update_profile(
    data: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    """
    Update the caller's profile.

    Raises:
        HTTPException 409: Username already taken
    """
    try:
        user = await service.update_profile(
            db, current_user.id, data.model_dump(exclude_unset=True)
        )
    except UserServiceError as e:
        _handle_service_error(e)

    return ApiResponse(message="Profile updated", data=UserResponse.model_validate(user))


@router.post(
    "/change-password",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_json)],
)
async def change_password(
    data: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """
    Change the caller's password.

    Raises:
        HTTPException 401: Current password is wrong
    """
    try:
        await service.change_password(
            db, current_user.id, data.old_password, data.new_password
        )
    except UserServiceError as e:
        _handle_service_error(e)

    return ApiResponse(message="Password changed")
