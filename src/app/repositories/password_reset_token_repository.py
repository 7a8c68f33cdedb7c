from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        pass

    @abstractmethod
    async def delete_unused_by_user_id(self, user_id: UUID) -> int:
        """Delete every unused token of a user. Returns count of deleted tokens."""
        pass

    @abstractmethod
    async def mark_used_if_unused(self, token_id: UUID, used_at: datetime) -> bool:
        """
        Mark a token used only if it is still unused (compare-and-swap).

        Returns True if this call consumed the token.
        """
        pass
