"""
Session Entity

One row per issued refresh token lineage step (user + device).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import RevocationReason, SessionState


class Session(SQLModel, table=True):
    """
    Session entity - server-side record behind a refresh token.

    Business Rules:
    - Session id is random and never reused
    - revoked_at is set at most once and never cleared
    - Rotation revokes the old row (reason=rotated) and points replaced_by at the new one
    - Rows are only deleted by the retention purge, after expiry
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    device_id: str = Field(max_length=255)

    issued_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revocation_reason: Optional[RevocationReason] = Field(default=None)
    replaced_by: Optional[UUID] = Field(default=None)

    __table_args__ = (
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_user_device", "user_id", "device_id"),
        Index("idx_session_revoked_at", "revoked_at"),
    )

    def is_active_at(self, now: datetime) -> bool:
        return self.revoked_at is None and self.expires_at > now

    def state_at(self, now: datetime) -> SessionState:
        if self.revoked_at is not None:
            if self.revocation_reason == RevocationReason.rotated:
                return SessionState.rotated
            return SessionState.revoked
        if self.expires_at <= now:
            return SessionState.expired
        return SessionState.active
