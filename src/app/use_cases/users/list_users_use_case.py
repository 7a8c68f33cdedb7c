import logging

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import UserPage, UserProfile

logger = logging.getLogger(__name__)


class ListUsersUseCase:
    """Paginated user listing for administrators (page is zero-based)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, page: int, size: int) -> Result[UserPage]:
        logger.info(f"Fetching all users with page: {page}, size: {size}")

        async with self.uow:
            users = await self.uow.users.list(offset=page * size, limit=size)
            total = await self.uow.users.count()

            return Return.ok(
                UserPage(
                    items=[UserProfile.from_user(u) for u in users],
                    page=page,
                    size=size,
                    total=total,
                )
            )
