from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def delete_unused_by_user_id(self, user_id: UUID) -> int:
        """Delete every unused token of a user"""
        stmt = delete(PasswordResetToken).where(
            col(PasswordResetToken.user_id) == user_id,
            col(PasswordResetToken.used_at).is_(None),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def mark_used_if_unused(self, token_id: UUID, used_at: datetime) -> bool:
        """Consume a token unless another transaction already did"""
        stmt = (
            update(PasswordResetToken)
            .where(
                col(PasswordResetToken.id) == token_id,
                col(PasswordResetToken.used_at).is_(None),
            )
            .values(used_at=used_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
