from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.errors import DuplicateUserError
from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        stmt = select(User).where(User.username == username)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username).limit(1)
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def list(self, offset: int, limit: int) -> List[User]:
        """Get a page of users ordered by creation time"""
        stmt = (
            select(User)
            .order_by(col(User.created_at), col(User.username))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(User)
        result = await self.session.exec(stmt)
        return result.one()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self._flush()
        await self.session.refresh(user)
        return user

    async def _flush(self) -> None:
        # Unique username/email races lost to a concurrent transaction
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateUserError(str(exc.orig)) from exc
