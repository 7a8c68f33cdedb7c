"""
User Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class RoleName(str, Enum):
    """Role names carried in access tokens"""

    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"
    ROLE_STUDENT = "ROLE_STUDENT"
    ROLE_INSTRUCTOR = "ROLE_INSTRUCTOR"
    # Only ever granted to callers presenting the internal API key
    ROLE_INTERNAL_SERVICE = "ROLE_INTERNAL_SERVICE"


class PrincipalKind(str, Enum):
    """Kind of authenticated caller"""

    end_user = "end_user"
    internal_service = "internal_service"
