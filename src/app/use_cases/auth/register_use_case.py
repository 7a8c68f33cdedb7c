"""
Register Use Case

Creates a user account and signs the new user in.
"""

import logging
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.app.errors import DuplicateUserError
from src.app.services.access_token_codec import AccessTokenCodec
from src.app.services.passwords import hash_password
from src.app.services.refresh_token_store import DEFAULT_VALIDITY, DeviceContext, RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import RoleName, User
from .dtos import AuthResponse, RegisterCommand
from .token_pair import TokenPairIssuer

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Reject if username or email is already taken
    2. Hash password with bcrypt cost factor 12
    3. Create enabled User with ROLE_USER
    4. Issue access token and refresh token
    5. Commit transaction atomically
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
        self, command: RegisterCommand, device: Optional[DeviceContext] = None
    ) -> Result[AuthResponse]:
        """
        Execute register use case

        Returns:
            Result[AuthResponse] with the token pair,
            or Error(USER_ALREADY_EXISTS) if username or email is taken
        """
        logger.info(f"Attempting to register user: {command.username}")

        async with self.uow:
            if await self.uow.users.exists_by_username(command.username):
                return Return.err(
                    Error(
                        "USER_ALREADY_EXISTS",
                        f"Username '{command.username}' is already taken.",
                    )
                )
            if await self.uow.users.exists_by_email(command.email):
                return Return.err(
                    Error(
                        "USER_ALREADY_EXISTS",
                        f"Email '{command.email}' is already registered.",
                    )
                )

            user = User(
                username=command.username,
                email=command.email,
                password_hash=hash_password(command.password),
                first_name=command.first_name,
                last_name=command.last_name,
                enabled=True,
                roles=[RoleName.ROLE_USER.value],
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateUserError:
                logger.warning(f"Concurrent registration lost for username: {command.username}")
                return Return.err(
                    Error(
                        "USER_ALREADY_EXISTS",
                        "Username or email is already registered.",
                    )
                )

            store = RefreshTokenStore(self.uow, self.refresh_validity)
            response = await TokenPairIssuer(self.codec, store).issue(user, device)

            await self.uow.commit()

        logger.info(f"User registered successfully: {user.username}")
        return Return.ok(response)
