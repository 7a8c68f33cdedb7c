import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import InternalUser

logger = logging.getLogger(__name__)


class LookupInternalUserUseCase:
    """User lookups served to other platform services"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def by_id(self, user_id: UUID) -> Result[InternalUser]:
        logger.debug(f"Internal API: Fetching user by ID: {user_id}")
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            return self._to_result(user, f"User '{user_id}' not found")

    async def by_username(self, username: str) -> Result[InternalUser]:
        logger.debug(f"Internal API: Fetching user by username: {username}")
        async with self.uow:
            user = await self.uow.users.get_by_username(username)
            return self._to_result(user, f"User with username '{username}' not found")

    async def by_email(self, email: str) -> Result[InternalUser]:
        logger.debug(f"Internal API: Fetching user by email: {email}")
        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            return self._to_result(user, f"User with email '{email}' not found")

    def _to_result(self, user, message: str) -> Result[InternalUser]:
        if user is None:
            return Return.err(Error("RESOURCE_NOT_FOUND", message))
        return Return.ok(InternalUser.from_user(user))
