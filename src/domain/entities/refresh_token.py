"""
RefreshToken Entity

Long-lived opaque credentials used to mint new access tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - one row per issued refresh token.

    Business Rules:
    - Only the SHA-256 hash of the token is stored
    - Rotated on every refresh: the old row is revoked, a new row issued
    - Never accepted once revoked_at is set or expires_at has passed
    - Expires after 7 days
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    # Device context
    user_agent: Optional[str] = Field(default=None, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=50)

    # Timestamps
    issued_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_refresh_token_expires_at", "expires_at"),
        Index("idx_refresh_token_user_revoked", "user_id", "revoked_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
