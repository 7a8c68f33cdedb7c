"""
Principal

The authenticated caller of a request, passed explicitly to handlers.
"""

from typing import List, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field

from .enums import PrincipalKind, RoleName


class EndUser(BaseModel):
    """A user authenticated with a bearer access token"""

    kind: Literal[PrincipalKind.end_user] = PrincipalKind.end_user
    id: UUID
    roles: List[str] = Field(default_factory=list)

    def has_role(self, role: RoleName) -> bool:
        return role.value in self.roles


class InternalService(BaseModel):
    """Another platform service authenticated with the internal API key"""

    kind: Literal[PrincipalKind.internal_service] = PrincipalKind.internal_service
    name: str = "internal-service"
    roles: List[str] = Field(
        default_factory=lambda: [RoleName.ROLE_INTERNAL_SERVICE.value]
    )

    def has_role(self, role: RoleName) -> bool:
        return role.value in self.roles


Principal = Union[EndUser, InternalService]
