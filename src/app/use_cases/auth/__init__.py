"""
Authentication Use Cases

All authentication-related business logic.
"""

from .dtos import (
    AuthResponse,
    ChangePasswordCommand,
    MessageResponse,
    RegisterCommand,
)
from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .change_password_use_case import ChangePasswordUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "ChangePasswordUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "ChangePasswordCommand",
    # DTOs - Responses
    "AuthResponse",
    "MessageResponse",
]
