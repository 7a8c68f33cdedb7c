from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by exact (case-sensitive) username"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by exact (case-sensitive) email address"""
        pass

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Check whether a username is taken"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email is registered"""
        pass

    @abstractmethod
    async def list(self, offset: int, limit: int) -> List[User]:
        """Get a page of users ordered by creation time"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all users"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises DuplicateUserError on a username/email clash."""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user. Raises DuplicateUserError on an email clash."""
        pass
