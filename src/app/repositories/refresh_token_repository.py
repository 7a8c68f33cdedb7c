from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get refresh token by token hash"""
        pass

    @abstractmethod
    async def get_active_by_user_id(self, user_id: UUID) -> List[RefreshToken]:
        """Get all non-revoked refresh tokens for a user (expired ones included)"""
        pass

    @abstractmethod
    async def revoke_if_active(self, token_id: UUID, revoked_at: datetime) -> bool:
        """
        Revoke a token only if it is not revoked yet (compare-and-swap).

        Returns True if this call revoked the token, False if it was already revoked.
        """
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: UUID, revoked_at: datetime) -> int:
        """Revoke all active tokens for a user. Returns count of revoked tokens."""
        pass
