"""
PasswordResetToken Entity

Secure password reset tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - secure password reset tokens.

    Business Rules:
    - Expires after 1 hour
    - Token is SHA-256 hash of secure random string
    - Single-use: used_at is set on confirmation
    - At most one unused token per user (older ones deleted on request)
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_user_used", "user_id", "used_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def is_used(self) -> bool:
        return self.used_at is not None
