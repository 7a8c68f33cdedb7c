import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import ChangePasswordCommand, ChangePasswordUseCase, MessageResponse
from src.app.use_cases.users import (
    AdminUpdateUserCommand,
    AdminUpdateUserUseCase,
    DeactivateUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
    UserPage,
    UserProfile,
)
from src.depends import get_admin_user, get_current_user, get_unit_of_work
from src.domain.entities import EndUser, RoleName

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User"])

NOT_FOUND = {"RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND}


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def get_my_profile(
    current_user: EndUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User Profile

    Raises:
        - 401 Unauthorized: Missing, invalid or expired access token
        - 403 Forbidden: Caller is an internal service, not a user
        - 404 Not Found: User no longer exists
    """
    result = await GetUserUseCase(uow).execute(current_user.id)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value


class UpdateProfileRequest(BaseModel):
    """Profile fields; omitted or blank fields are left unchanged"""

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None


@router.patch("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_my_profile(
    request: UpdateProfileRequest,
    current_user: EndUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Own Profile

    Raises:
        - 404 Not Found: User no longer exists
        - 409 Conflict: Email registered by another user
    """
    logger.info(f"Received profile update request for user: {current_user.id}")
    command = UpdateProfileCommand(**request.model_dump())
    result = await UpdateProfileUseCase(uow).execute(current_user.id, command)

    if result.is_err():
        raise_for_error(
            result.error, {**NOT_FOUND, "USER_ALREADY_EXISTS": status.HTTP_409_CONFLICT}
        )

    return result.value


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.patch("/me/password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def change_my_password(
    request: ChangePasswordRequest,
    current_user: EndUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change Own Password

    Every refresh token of the user is revoked; all devices must log in again.

    Raises:
        - 401 Unauthorized: Current password does not match
        - 404 Not Found: User no longer exists
    """
    logger.info(f"Received password change request for user: {current_user.id}")
    command = ChangePasswordCommand(
        current_password=request.current_password, new_password=request.new_password
    )
    result = await ChangePasswordUseCase(uow).execute(current_user.id, command)

    if result.is_err():
        raise_for_error(
            result.error,
            {**NOT_FOUND, "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED},
        )

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=UserPage)
async def list_users(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    admin: EndUser = Depends(get_admin_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List Users (admin only)"""
    logger.info(f"Admin request to get all users. Page: {page}, Size: {size}")
    result = await ListUsersUseCase(uow).execute(page, size)

    if result.is_err():
        raise_for_error(result.error, {})

    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def get_user(
    user_id: UUID,
    admin: EndUser = Depends(get_admin_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Get User by ID (admin only)"""
    logger.info(f"Admin request to get user by ID: {user_id}")
    result = await GetUserUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value


class AdminUpdateUserRequest(BaseModel):
    """Admin update payload; omitted fields are left unchanged"""

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    enabled: Optional[bool] = None
    roles: Optional[List[RoleName]] = None


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def update_user(
    user_id: UUID,
    request: AdminUpdateUserRequest,
    admin: EndUser = Depends(get_admin_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update User (admin only)

    Disabling a user revokes all of their refresh tokens.

    Raises:
        - 400 Bad Request: Empty role set or internal-service role requested
        - 404 Not Found: User not found
        - 409 Conflict: Email registered by another user
    """
    logger.info(f"Admin request to update user ID: {user_id}")
    command = AdminUpdateUserCommand(**request.model_dump())
    result = await AdminUpdateUserUseCase(uow).execute(user_id, command)

    if result.is_err():
        raise_for_error(
            result.error,
            {
                **NOT_FOUND,
                "USER_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
                "INVALID_ROLES": status.HTTP_400_BAD_REQUEST,
            },
        )

    return result.value


@router.delete("/{user_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    admin: EndUser = Depends(get_admin_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Deactivate User (admin only)

    Soft delete: the account is disabled and logged out everywhere.
    """
    logger.info(f"Admin request to delete (deactivate) user ID: {user_id}")
    result = await DeactivateUserUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error, NOT_FOUND)

    return result.value
