"""
Refresh Token Use Case

Handles access token refresh with refresh token rotation for security.
"""

import logging
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.passwords import token_preview
from src.app.services.refresh_token_store import DEFAULT_VALIDITY, DeviceContext, RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from .dtos import AuthResponse
from .token_pair import TokenPairIssuer

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token rotation: old token revoked, new token issued
    - A rotated or revoked token is never accepted again
    - Expired tokens are rejected (and revoked)
    - Disabled users cannot refresh; the rotation is rolled back
    - New access token carries the user's current roles
    """

    def __init__(
        self,
        uow: UnitOfWork,
        codec: AccessTokenCodec,
        refresh_validity: timedelta = DEFAULT_VALIDITY,
    ):
        self.uow = uow
        self.codec = codec
        self.refresh_validity = refresh_validity

    async def execute(
        self, refresh_token: str, device: Optional[DeviceContext] = None
    ) -> Result[AuthResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate
            device: Client metadata recorded with the new refresh token

        Returns:
            Result with AuthResponse containing new tokens, or Error
        """
        logger.info(f"Attempting to refresh token {token_preview(refresh_token)}")

        async with self.uow:
            store = RefreshTokenStore(self.uow, self.refresh_validity)
            rotated = await store.rotate(refresh_token, device)
            if rotated.is_err():
                return Return.err(rotated.error)

            user, new_refresh_token = rotated.value
            if not user.enabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            response = TokenPairIssuer(self.codec, store).build_response(
                user, new_refresh_token
            )

            await self.uow.commit()

        logger.info(f"Token refreshed successfully for user: {user.username}")
        return Return.ok(response)
