"""
Admin Update User Use Case

Lets an administrator change any user's profile, enabled flag and roles.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.errors import DuplicateUserError
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RoleName
from .dtos import AdminUpdateUserCommand, UserProfile
from .update_profile_use_case import apply_profile_changes, email_taken

logger = logging.getLogger(__name__)


class AdminUpdateUserUseCase:
    """
    Business Rules:
    - Blank name/email fields are ignored; email must stay unique
    - Roles, when given, replace the current set and must not be empty
    - The internal-service role can never be granted to a user
    - Disabling a user revokes all of their refresh tokens
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: AdminUpdateUserCommand
    ) -> Result[UserProfile]:
        logger.info(f"Admin updating user ID: {user_id}")

        if command.roles is not None:
            if not command.roles:
                return Return.err(
                    Error("INVALID_ROLES", "User must have at least one role.")
                )
            if RoleName.ROLE_INTERNAL_SERVICE in command.roles:
                return Return.err(
                    Error("INVALID_ROLES", "ROLE_INTERNAL_SERVICE cannot be assigned to users.")
                )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("RESOURCE_NOT_FOUND", f"User '{user_id}' not found"))

            changed = await apply_profile_changes(
                self.uow, user, command.first_name, command.last_name, command.email
            )
            if changed.is_err():
                return Return.err(changed.error)

            if command.roles is not None:
                user.roles = sorted({r.value for r in command.roles})

            disabling = command.enabled is False and user.enabled
            if command.enabled is not None:
                user.enabled = command.enabled

            user.updated_at = utcnow()
            try:
                user = await self.uow.users.update(user)
            except DuplicateUserError:
                return Return.err(email_taken(command.email))

            if disabling:
                await RefreshTokenStore(self.uow).revoke_all(user)

            await self.uow.commit()

        logger.info(f"User ID {user_id} updated by admin.")
        return Return.ok(UserProfile.from_user(user))
