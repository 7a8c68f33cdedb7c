import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.app.use_cases.auth.dtos import MessageResponse

logger = logging.getLogger(__name__)


class DeactivateUserUseCase:
    """
    Soft delete: the user is disabled and logged out of every device.
    The record is kept so internal lookups still resolve.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[MessageResponse]:
        logger.info(f"Attempting to delete/deactivate user ID: {user_id}")

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("RESOURCE_NOT_FOUND", f"User '{user_id}' not found"))

            user.enabled = False
            user.updated_at = utcnow()
            await self.uow.users.update(user)
            await RefreshTokenStore(self.uow).revoke_all(user)

            await self.uow.commit()

        logger.info(f"User ID {user_id} deactivated successfully (soft-deleted).")
        return Return.ok(MessageResponse(message="User deactivated successfully."))
