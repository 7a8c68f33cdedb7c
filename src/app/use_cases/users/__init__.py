"""
User Management Use Cases

Profile self-service, administration and internal lookups.
"""

from .dtos import (
    AdminUpdateUserCommand,
    InternalUser,
    UpdateProfileCommand,
    UserPage,
    UserProfile,
)
from .get_user_use_case import GetUserUseCase
from .list_users_use_case import ListUsersUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .admin_update_user_use_case import AdminUpdateUserUseCase
from .deactivate_user_use_case import DeactivateUserUseCase
from .lookup_internal_user_use_case import LookupInternalUserUseCase

__all__ = [
    # Use Cases
    "GetUserUseCase",
    "ListUsersUseCase",
    "UpdateProfileUseCase",
    "AdminUpdateUserUseCase",
    "DeactivateUserUseCase",
    "LookupInternalUserUseCase",
    # DTOs
    "UpdateProfileCommand",
    "AdminUpdateUserCommand",
    "UserProfile",
    "UserPage",
    "InternalUser",
]
