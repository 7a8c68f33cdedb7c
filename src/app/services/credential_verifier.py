"""
Credential Verifier

Checks an identifier + password pair against the stored bcrypt hash.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid username/email or password")


class CredentialVerifier:
    """
    Resolves the identifier against username first, then email (both
    case-sensitive), and verifies the password in constant time.

    The enabled flag is not checked here; callers decide what a disabled
    account may do.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def verify(self, identifier: str, password: str) -> Result[User]:
        user = await self.uow.users.get_by_username(identifier)
        if user is None:
            user = await self.uow.users.get_by_email(identifier)

        if user is None:
            burn_password_check(password)
            logger.info("Credential check failed: unknown identifier")
            return Return.err(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.info(f"Credential check failed for user {user.id}")
            return Return.err(INVALID_CREDENTIALS)

        return Return.ok(user)
