"""
Confirm Password Reset Use Case

Handles password reset confirmation with secure token validation.
"""

from libs.result import Result, Return
from src.app.services.notifier import INotifier
from src.app.services.password_reset_flow import PasswordResetFlow
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token must exist, be unused and unexpired
    - Token can be consumed exactly once
    - All refresh tokens revoked after reset
    """

    def __init__(self, uow: UnitOfWork, notifier: INotifier, reset_url: str):
        self.uow = uow
        self.notifier = notifier
        self.reset_url = reset_url

    async def execute(self, token: str, new_password: str) -> Result[MessageResponse]:
        """
        Errors:
            - INVALID_TOKEN: Token not found or superseded
            - TOKEN_EXPIRED: Token has expired
            - TOKEN_REVOKED_OR_REUSED: Token has already been used
        """
        async with self.uow:
            flow = PasswordResetFlow(
                self.uow, self.notifier, RefreshTokenStore(self.uow), self.reset_url
            )
            result = await flow.consume_reset(token, new_password)
            if result.is_err():
                return Return.err(result.error)

        return Return.ok(MessageResponse(message="Password has been reset successfully."))
