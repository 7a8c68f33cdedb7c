from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import UserProfile


class GetUserUseCase:
    """Load one user's profile (self-service or admin)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserProfile]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("RESOURCE_NOT_FOUND", f"User '{user_id}' not found"))

            return Return.ok(UserProfile.from_user(user))
