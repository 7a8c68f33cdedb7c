"""
User Entity

Represents a person registered on the learning platform.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import RoleName


class User(SQLModel, table=True):
    """
    User entity - identity record owned by the user store.

    Business Rules:
    - Username and email are each unique (case-sensitive)
    - Password stored as bcrypt hash (cost factor 12)
    - Disabled users cannot obtain tokens
    - roles is always reassigned, never mutated in place (JSON column)
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    enabled: bool = Field(default=True)
    roles: List[str] = Field(
        default_factory=lambda: [RoleName.ROLE_USER.value], sa_column=Column(JSON)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_enabled", "enabled"),)

    @property
    def display_name(self) -> str:
        return self.first_name or self.username
