"""
Login Use Case

Handles user authentication and returns an access + refresh token pair.
"""

import logging
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.credential_verifier import CredentialVerifier
from src.app.services.refresh_token_store import DEFAULT_VALIDITY, DeviceContext, RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from .dtos import AuthResponse
from .token_pair import TokenPairIssuer

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Identifier matches username first, then email
    - Constant-time password comparison to prevent timing attacks
    - Disabled users are rejected after password verification
    - Creates a new refresh token bound to the device context
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
        self, identifier: str, password: str, device: Optional[DeviceContext] = None
    ) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            identifier: Username or email
            password: Plain text password
            device: Client metadata recorded with the refresh token

        Returns:
            Result with AuthResponse, or Error(INVALID_CREDENTIALS | USER_DISABLED)
        """
        logger.info(f"Attempting to log in user: {identifier}")

        async with self.uow:
            verified = await CredentialVerifier(self.uow).verify(identifier, password)
            if verified.is_err():
                logger.warning(f"Authentication failed for user {identifier}")
                return Return.err(verified.error)

            user = verified.value
            if not user.enabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            store = RefreshTokenStore(self.uow, self.refresh_validity)
            response = await TokenPairIssuer(self.codec, store).issue(user, device)

            await self.uow.commit()

        logger.info(f"User logged in successfully: {user.username}")
        return Return.ok(response)
