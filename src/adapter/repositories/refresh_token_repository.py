from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import col, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get refresh token by token hash"""
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_active_by_user_id(self, user_id: UUID) -> List[RefreshToken]:
        """Get all non-revoked refresh tokens for a user"""
        stmt = select(RefreshToken).where(
            RefreshToken.user_id == user_id,
            col(RefreshToken.revoked_at).is_(None),
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def revoke_if_active(self, token_id: UUID, revoked_at: datetime) -> bool:
        """Revoke a token unless another transaction already did"""
        stmt = (
            update(RefreshToken)
            .where(
                col(RefreshToken.id) == token_id,
                col(RefreshToken.revoked_at).is_(None),
            )
            .values(revoked_at=revoked_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def revoke_all_by_user_id(self, user_id: UUID, revoked_at: datetime) -> int:
        """Revoke all active tokens for a user"""
        stmt = (
            update(RefreshToken)
            .where(
                col(RefreshToken.user_id) == user_id,
                col(RefreshToken.revoked_at).is_(None),
            )
            .values(revoked_at=revoked_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
