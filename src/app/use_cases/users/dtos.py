"""
User Management DTOs

Commands and responses for profile, administration and internal lookups.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from src.domain.entities import RoleName, User


class UpdateProfileCommand(BaseModel):
    """Fields a user may change on their own profile"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class AdminUpdateUserCommand(BaseModel):
    """Fields an administrator may change on any user"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    enabled: Optional[bool] = None
    roles: Optional[List[RoleName]] = None


class UserProfile(BaseModel):
    """User details returned to end users and administrators"""

    id: str
    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    enabled: bool
    roles: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            enabled=user.enabled,
            roles=sorted(user.roles),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserPage(BaseModel):
    """One page of users"""

    items: List[UserProfile]
    page: int
    size: int
    total: int


class InternalUser(BaseModel):
    """User details exposed to other platform services"""

    id: str
    username: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    enabled: bool
    roles: List[str]

    @classmethod
    def from_user(cls, user: User) -> "InternalUser":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            enabled=user.enabled,
            roles=sorted(user.roles),
        )
