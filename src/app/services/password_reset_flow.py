"""
Password Reset Flow

Issues one-time reset tokens, emails them out, and consumes them exactly once.
"""

import logging
import secrets
from datetime import timedelta
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.notifier import INotifier
from src.app.services.passwords import hash_password, hash_token, token_preview
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken, User

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY = timedelta(minutes=60)

# Runs a coroutine function with its arguments outside the request, e.g.
# BackgroundTasks.add_task
Schedule = Callable[..., None]

EMAIL_SUBJECT = "LMS Password Reset Request"
EMAIL_TEMPLATE = (
    "Dear {name},\n\n"
    "You have requested to reset your password. "
    "Please use the following link to reset your password:\n\n"
    "{link}\n\n"
    "This link will expire in {minutes} minutes.\n\n"
    "If you did not request a password reset, please ignore this email.\n\n"
    "Regards,\nLMS Support Team"
)


class PasswordResetFlow:
    """
    Reset token state machine: ISSUED -> USED | EXPIRED (both terminal).

    Both operations run inside a unit of work entered by the caller and
    commit it themselves.

    Business Rules:
    - Token is 32 random bytes (urlsafe); only its SHA-256 hash is stored
    - Expires after 60 minutes by default
    - Requesting a reset deletes the user's unused tokens first, so only
      one can be active
    - Unknown emails get the same outcome as known ones (no enumeration)
    - The email is handed to the caller's scheduler after commit, so known
      and unknown emails answer equally fast; a failed send is logged and the
      token stays
    - Consuming marks used_at with a compare-and-swap and revokes every
      refresh token of the user
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotifier,
        refresh_tokens: RefreshTokenStore,
        reset_url: str,
        validity: timedelta = DEFAULT_VALIDITY,
    ):
        self.uow = uow
        self.notifier = notifier
        self.refresh_tokens = refresh_tokens
        self.reset_url = reset_url
        self.validity = validity

    async def request_reset(self, email: str, schedule: Schedule) -> Result[None]:
        user = await self.uow.users.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return Return.ok(None)

        superseded = await self.uow.password_reset_tokens.delete_unused_by_user_id(user.id)
        if superseded:
            logger.info(f"Discarded {superseded} earlier reset token(s) for user {user.id}")

        token = secrets.token_urlsafe(32)
        now = utcnow()
        await self.uow.password_reset_tokens.create(
            PasswordResetToken(
                user_id=user.id,
                token_hash=hash_token(token),
                created_at=now,
                expires_at=now + self.validity,
            )
        )
        await self.uow.commit()
        logger.info(f"Generated password reset token for user {user.id}")

        schedule(self.deliver_reset_email, user.id, user.email, self._reset_email_body(user, token))
        return Return.ok(None)

    def _reset_email_body(self, user: User, token: str) -> str:
        return EMAIL_TEMPLATE.format(
            name=user.display_name,
            link=f"{self.reset_url}?token={token}",
            minutes=int(self.validity.total_seconds() // 60),
        )

    async def deliver_reset_email(self, user_id: UUID, to: str, body: str) -> None:
        try:
            await self.notifier.send_email(to, EMAIL_SUBJECT, body)
        except Exception:
            logger.exception(f"Failed to send password reset email to user {user_id}")

    async def consume_reset(self, token: str, new_password: str) -> Result[None]:
        """
        Errors:
            - INVALID_TOKEN: unknown or superseded token
            - TOKEN_REVOKED_OR_REUSED: token already used
            - TOKEN_EXPIRED: token past its expiry
            - RESOURCE_NOT_FOUND: owning user no longer exists
        """
        reset_token = await self.uow.password_reset_tokens.get_by_token_hash(hash_token(token))
        if reset_token is None:
            return Return.err(
                Error("INVALID_TOKEN", "Invalid or expired password reset token")
            )

        if reset_token.is_used:
            logger.warning(f"Used password reset token {token_preview(token)} presented again")
            return Return.err(
                Error(
                    "TOKEN_REVOKED_OR_REUSED",
                    "Password reset token has already been used. Please request a new one.",
                )
            )

        now = utcnow()
        if reset_token.is_expired(now):
            return Return.err(
                Error(
                    "TOKEN_EXPIRED",
                    "Password reset token has expired. Please request a new one.",
                )
            )

        user = await self.uow.users.get_by_id(reset_token.user_id)
        if user is None:
            return Return.err(Error("RESOURCE_NOT_FOUND", "User not found"))

        if not await self.uow.password_reset_tokens.mark_used_if_unused(reset_token.id, now):
            return Return.err(
                Error(
                    "TOKEN_REVOKED_OR_REUSED",
                    "Password reset token has already been used. Please request a new one.",
                )
            )

        user.password_hash = hash_password(new_password)
        user.updated_at = now
        await self.uow.users.update(user)

        await self.refresh_tokens.revoke_all(user)

        await self.uow.commit()
        logger.info(f"Password reset completed for user {user.id}")
        return Return.ok(None)
