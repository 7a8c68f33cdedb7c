"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

from datetime import timedelta

from libs.result import Result, Return
from src.app.services.notifier import INotifier
from src.app.services.password_reset_flow import DEFAULT_VALIDITY, PasswordResetFlow, Schedule
from src.app.services.refresh_token_store import RefreshTokenStore
from src.app.services.unit_of_work import UnitOfWork
from .dtos import MessageResponse


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Always reports success so the response never reveals whether the
    email is registered. The email itself is passed to `schedule` and
    sent after the response.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotifier,
        reset_url: str,
        reset_validity: timedelta = DEFAULT_VALIDITY,
    ):
        self.uow = uow
        self.notifier = notifier
        self.reset_url = reset_url
        self.reset_validity = reset_validity

    async def execute(self, email: str, schedule: Schedule) -> Result[MessageResponse]:
        async with self.uow:
            flow = PasswordResetFlow(
                self.uow,
                self.notifier,
                RefreshTokenStore(self.uow),
                self.reset_url,
                self.reset_validity,
            )
            result = await flow.request_reset(email, schedule)
            if result.is_err():
                return Return.err(result.error)

        return Return.ok(
            MessageResponse(
                message="If the email is registered, a password reset link has been sent."
            )
        )
