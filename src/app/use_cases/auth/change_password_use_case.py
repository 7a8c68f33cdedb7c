"""
Change Password Use Case

Authenticated self-service password change.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password, verify_password
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import ChangePasswordCommand, MessageResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the caller's own password.

    Business Rules:
    - Current password must match
    - New password hashed with bcrypt (cost factor 12)
    - All refresh tokens revoked: every device must log in again
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: ChangePasswordCommand
    ) -> Result[MessageResponse]:
        logger.info(f"Attempting to change password for user ID: {user_id}")

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("RESOURCE_NOT_FOUND", "User not found"))

            if not verify_password(command.current_password, user.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password does not match.")
                )

            user.password_hash = hash_password(command.new_password)
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            await RefreshTokenStore(self.uow).revoke_all(user)

            await self.uow.commit()

        logger.info(f"Password changed successfully for user ID: {user_id}")
        return Return.ok(MessageResponse(message="Password changed successfully."))
