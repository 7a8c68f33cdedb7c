"""
User Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import PrincipalKind, RoleName

# Export all entities
from .user import User
from .refresh_token import RefreshToken
from .password_reset_token import PasswordResetToken
from .principal import EndUser, InternalService, Principal

__all__ = [
    # Enums
    "RoleName",
    "PrincipalKind",
    # Entities
    "User",
    "RefreshToken",
    "PasswordResetToken",
    # Principals
    "EndUser",
    "InternalService",
    "Principal",
]
