"""
User Entity

Credential record read during authentication.
"""

from datetime import UTC, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - the credential record behind a login.

    Business Rules:
    - Email is unique and stored lower-cased
    - Password stored as bcrypt hash (cost factor from HASH_COST_FACTOR)
    - Soft-deleted users (deleted_at set) cannot authenticate
    - Disabled users are told so only after presenting the right password
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: UserStatus = Field(default=UserStatus.active)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC).replace(tzinfo=None),
        sa_column=Column(DateTime),
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    def can_authenticate(self) -> bool:
        return self.deleted_at is None

    @property
    def is_disabled(self) -> bool:
        return self.status == UserStatus.disabled
