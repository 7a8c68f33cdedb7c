"""
Refresh Token Store

Issues, redeems, rotates and revokes long-lived opaque refresh tokens.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_token, token_preview
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RefreshToken, User

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY = timedelta(days=7)


class DeviceContext(BaseModel):
    """Client metadata recorded with each refresh token"""

    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class RefreshTokenStore:
    """
    Refresh token lifecycle on top of the unit of work.

    The caller owns the transaction: it enters the unit of work, calls the
    store, and commits. The only exception is the lazy revocation of an
    expired token in redeem(), which is committed immediately because the
    caller will abort on the returned error.

    Business Rules:
    - Token is 32 random bytes (urlsafe); only its SHA-256 hash is stored
    - Expires after 7 days by default
    - Rotation revokes the presented token with a compare-and-swap, so of two
      concurrent rotations of the same token exactly one succeeds
    - A revoked token presented again is reported as possible reuse
    """

    def __init__(self, uow: UnitOfWork, validity: timedelta = DEFAULT_VALIDITY):
        self.uow = uow
        self.validity = validity

    async def issue(self, user: User, device: Optional[DeviceContext] = None) -> str:
        """
        Issue and persist a new refresh token for a user.

        Returns:
            The plain token string (only ever returned to the client)
        """
        device = device or DeviceContext()
        now = utcnow()

        # Clean up expired tokens the user never came back for
        for stale in await self.uow.refresh_tokens.get_active_by_user_id(user.id):
            if stale.is_expired(now):
                await self.uow.refresh_tokens.revoke_if_active(stale.id, now)

        token = secrets.token_urlsafe(32)
        await self.uow.refresh_tokens.create(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(token),
                issued_at=now,
                expires_at=now + self.validity,
                user_agent=device.user_agent,
                ip_address=device.ip_address,
            )
        )
        logger.info(f"Issued refresh token {token_preview(token)} for user {user.id}")
        return token

    async def _find_usable(self, token: str) -> Result[Tuple[RefreshToken, User]]:
        stored = await self.uow.refresh_tokens.get_by_token_hash(hash_token(token))
        if stored is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

        if stored.is_revoked:
            logger.warning(
                f"Revoked refresh token {token_preview(token)} presented for user "
                f"{stored.user_id}: possible token reuse"
            )
            return Return.err(
                Error(
                    "TOKEN_REVOKED_OR_REUSED",
                    "Refresh token has been revoked or already used. Please log in again.",
                )
            )

        now = utcnow()
        if stored.is_expired(now):
            if await self.uow.refresh_tokens.revoke_if_active(stored.id, now):
                await self.uow.commit()
            return Return.err(
                Error("TOKEN_EXPIRED", "Refresh token has expired. Please log in again.")
            )

        user = await self.uow.users.get_by_id(stored.user_id)
        if user is None:
            return Return.err(Error("RESOURCE_NOT_FOUND", "User not found"))

        return Return.ok((stored, user))

    async def redeem(self, token: str) -> Result[User]:
        """
        Check a refresh token without consuming it.

        Errors:
            - INVALID_TOKEN: no token with this value
            - TOKEN_REVOKED_OR_REUSED: token was revoked or already rotated
            - TOKEN_EXPIRED: token has expired (it is revoked as a side effect)
            - RESOURCE_NOT_FOUND: owning user no longer exists
        """
        found = await self._find_usable(token)
        if found.is_err():
            return Return.err(found.error)
        _, user = found.value
        return Return.ok(user)

    async def rotate(
        self, token: str, device: Optional[DeviceContext] = None
    ) -> Result[Tuple[User, str]]:
        """
        Consume a refresh token and issue its replacement.

        Same errors as redeem(). Losing a concurrent rotation of the same
        token also fails with TOKEN_REVOKED_OR_REUSED.
        """
        found = await self._find_usable(token)
        if found.is_err():
            return Return.err(found.error)
        stored, user = found.value

        if not await self.uow.refresh_tokens.revoke_if_active(stored.id, utcnow()):
            logger.warning(
                f"Refresh token {token_preview(token)} was rotated concurrently "
                f"for user {user.id}"
            )
            return Return.err(
                Error(
                    "TOKEN_REVOKED_OR_REUSED",
                    "Refresh token has been revoked or already used. Please log in again.",
                )
            )

        new_token = await self.issue(user, device)
        return Return.ok((user, new_token))

    async def revoke_all(self, user: User) -> int:
        """Revoke every active refresh token of a user. Returns count revoked."""
        revoked = await self.uow.refresh_tokens.revoke_all_by_user_id(user.id, utcnow())
        logger.info(f"Revoked {revoked} refresh token(s) for user {user.id}")
        return revoked
