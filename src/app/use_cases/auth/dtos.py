"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional
from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ChangePasswordCommand(BaseModel):
    """Change password command for an authenticated user"""

    current_password: str
    new_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthResponse(BaseModel):
    """Token pair returned by register, login and refresh"""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: str
    expires_in: int
    user_id: str
    username: str
    email: str


class MessageResponse(BaseModel):
    """Plain status message"""

    message: str
