import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import TOKEN_ERROR_STATUS, raise_for_error
from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.notifier import INotifier
from src.app.services.refresh_token_store import DeviceContext
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthResponse,
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    MessageResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
)
from src.depends import (
    PASSWORD_RESET_VALIDITY,
    REFRESH_TOKEN_VALIDITY,
    get_access_token_codec,
    get_device_context,
    get_notifier,
    get_unit_of_work,
)
from config import ApplicationConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    """

    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
    device: DeviceContext = Depends(get_device_context),
):
    """
    User Registration

    Creates an account with ROLE_USER and returns an access + refresh token pair.

    Raises:
        - 409 Conflict: Username or email already taken
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    logger.info(f"Received registration request for username: {request.username}")
    command = RegisterCommand(
        username=request.username,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )

    use_case = RegisterUseCase(uow, codec, REFRESH_TOKEN_VALIDITY)
    result = await use_case.execute(command, device)

    if result.is_err():
        raise_for_error(result.error, {"USER_ALREADY_EXISTS": status.HTTP_409_CONFLICT})

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    identifier: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
    device: DeviceContext = Depends(get_device_context),
):
    """
    User Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: User disabled
    """
    logger.info(f"Received login request for identifier: {request.identifier}")
    use_case = LoginUseCase(uow, codec, REFRESH_TOKEN_VALIDITY)
    result = await use_case.execute(request.identifier, request.password, device)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
                "USER_DISABLED": status.HTTP_403_FORBIDDEN,
            },
        )

    return result.value


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
    device: DeviceContext = Depends(get_device_context),
):
    """
    Refresh Access Token

    Rotates the refresh token: the presented token is revoked and a new
    one is returned with the new access token.

    Raises:
        - 401 Unauthorized: Unknown, expired, revoked or reused refresh token
        - 403 Forbidden: User disabled
    """
    logger.info("Received refresh token request.")
    use_case = RefreshTokenUseCase(uow, codec, REFRESH_TOKEN_VALIDITY)
    result = await use_case.execute(request.refresh_token, device)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                **TOKEN_ERROR_STATUS,
                "USER_DISABLED": status.HTTP_403_FORBIDDEN,
                "RESOURCE_NOT_FOUND": status.HTTP_401_UNAUTHORIZED,
            },
        )

    return result.value


class ForgotPasswordRequest(BaseModel):
    """Forgot password HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Request Password Reset

    Emails a one-time reset link valid for 60 minutes.

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - Earlier unused reset tokens of the user are discarded
        - The email goes out after the response, so timing reveals nothing
    """
    logger.info("Received forgot password request.")
    use_case = RequestPasswordResetUseCase(
        uow, notifier, ApplicationConfig.PASSWORD_RESET_URL, PASSWORD_RESET_VALIDITY
    )
    result = await use_case.execute(request.email, background_tasks.add_task)

    if result.is_err():
        raise_for_error(result.error, {})

    return result.value


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    token: str = Field(..., min_length=1, description="Password reset token from email")
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
):
    """
    Confirm Password Reset

    Sets the new password, consumes the token and revokes every refresh token.

    Raises:
        - 400 Bad Request: Unknown or superseded token
        - 409 Conflict: Token already used
        - 410 Gone: Token expired
    """
    logger.info("Received reset password request with token.")
    use_case = ConfirmPasswordResetUseCase(uow, notifier, ApplicationConfig.PASSWORD_RESET_URL)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
                "TOKEN_REVOKED_OR_REUSED": status.HTTP_409_CONFLICT,
                "TOKEN_EXPIRED": status.HTTP_410_GONE,
                "RESOURCE_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
            },
        )

    return result.value
