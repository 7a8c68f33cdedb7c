"""
Update Profile Use Case

Lets a user change their own names and email address.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.errors import DuplicateUserError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import User
from .dtos import UpdateProfileCommand, UserProfile

logger = logging.getLogger(__name__)


def email_taken(email: str) -> Error:
    return Error("USER_ALREADY_EXISTS", f"Email '{email}' is already registered by another user.")


async def apply_profile_changes(
    uow: UnitOfWork, user: User, first_name, last_name, email
) -> Result[User]:
    """
    Apply non-blank name and email changes to a user.

    Blank values are ignored. Changing the email to one registered by another
    user fails with USER_ALREADY_EXISTS.
    """
    if first_name is not None and first_name.strip():
        user.first_name = first_name.strip()
    if last_name is not None and last_name.strip():
        user.last_name = last_name.strip()

    if email is not None and email.strip():
        new_email = email.strip()
        if new_email != user.email:
            if await uow.users.exists_by_email(new_email):
                return Return.err(email_taken(new_email))
            user.email = new_email

    return Return.ok(user)


class UpdateProfileUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: UpdateProfileCommand
    ) -> Result[UserProfile]:
        logger.info(f"Updating profile for user ID: {user_id}")

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("RESOURCE_NOT_FOUND", f"User '{user_id}' not found"))

            changed = await apply_profile_changes(
                self.uow, user, command.first_name, command.last_name, command.email
            )
            if changed.is_err():
                return Return.err(changed.error)

            user.updated_at = utcnow()
            try:
                user = await self.uow.users.update(user)
            except DuplicateUserError:
                return Return.err(email_taken(command.email))
            await self.uow.commit()

        logger.info(f"Profile updated successfully for user ID: {user_id}")
        return Return.ok(UserProfile.from_user(user))
