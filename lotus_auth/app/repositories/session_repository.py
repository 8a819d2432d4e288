from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from lotus_auth.domain.entities import RevocationReason, Session


class RotationOutcome(str, Enum):
    """Result of a compare-and-revoke rotation attempt"""

    rotated = "rotated"
    replay_detected = "replay_detected"
    revoked = "revoked"
    invalid = "invalid"


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def list_active_by_user_id(self, user_id: UUID, now: datetime) -> List[Session]:
        """Active (not revoked, not expired) sessions of a user, newest first"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Insert a new active session"""
        pass

    @abstractmethod
    async def is_active(self, session_id: UUID, now: datetime) -> bool:
        """True iff the session exists, is not revoked and has not expired"""
        pass

    @abstractmethod
    async def revoke(
        self, session_id: UUID, now: datetime, reason: RevocationReason
    ) -> bool:
        """Revoke one session. Idempotent; returns True only if this call revoked it."""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(
        self,
        user_id: UUID,
        now: datetime,
        reason: RevocationReason,
        device_id: Optional[str] = None,
    ) -> int:
        """Revoke every active session of a user (optionally one device). Returns count."""
        pass

    @abstractmethod
    async def revoke_all_except_session(
        self, user_id: UUID, session_id: UUID, now: datetime
    ) -> int:
        """Revoke all sessions of a user except the specified one. Returns count."""
        pass

    @abstractmethod
    async def rotate(
        self,
        old_session_id: UUID,
        user_id: UUID,
        new_session: Session,
        now: datetime,
    ) -> RotationOutcome:
        """
        Atomically revoke old_session_id and insert new_session.

        The old row is revoked by a single conditional update; new_session is
        only inserted when that update matched.
        """
        pass

    @abstractmethod
    async def delete_expired(self, before: datetime) -> int:
        """Hard-delete sessions that expired before the given instant. Returns count."""
        pass
