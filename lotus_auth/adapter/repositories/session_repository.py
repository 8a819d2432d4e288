from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from lotus_auth.app.repositories.session_repository import (
    ISessionRepository,
    RotationOutcome,
)
from lotus_auth.domain.entities import RevocationReason, Session

# The only revocation that means "this refresh token was already spent"; sessions
# caught in a replay sweep were never presented and report plain revocation
SPENT_REASONS = (RevocationReason.rotated,)


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_active_by_user_id(self, user_id: UUID, now: datetime) -> List[Session]:
        """Active sessions of a user, newest first"""
        stmt = (
            select(Session)
            .where(
                Session.user_id == user_id,
                Session.revoked_at.is_(None),
                Session.expires_at > now,
            )
            .order_by(Session.issued_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, session_obj: Session) -> Session:
        """Insert a new active session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def is_active(self, session_id: UUID, now: datetime) -> bool:
        stmt = select(Session.id).where(
            Session.id == session_id,
            Session.revoked_at.is_(None),
            Session.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def revoke(
        self, session_id: UUID, now: datetime, reason: RevocationReason
    ) -> bool:
        """Revoke a specific session by ID; no-op if already revoked or missing"""
        stmt = (
            update(Session)
            .where(Session.id == session_id, Session.revoked_at.is_(None))
            .values(revoked_at=now, revocation_reason=reason)
        )
        result = await self.session.exec(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_user_id(
        self,
        user_id: UUID,
        now: datetime,
        reason: RevocationReason,
        device_id: Optional[str] = None,
    ) -> int:
        """Revoke all active sessions for a user, optionally limited to one device"""
        conditions = [
            Session.user_id == user_id,
            Session.revoked_at.is_(None),
            Session.expires_at > now,
        ]
        if device_id is not None:
            conditions.append(Session.device_id == device_id)

        stmt = (
            update(Session)
            .where(*conditions)
            .values(revoked_at=now, revocation_reason=reason)
        )
        result = await self.session.exec(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke_all_except_session(
        self, user_id: UUID, session_id: UUID, now: datetime
    ) -> int:
        """Revoke all sessions for a user except the specified session"""
        stmt = (
            update(Session)
            .where(
                Session.user_id == user_id,
                Session.id != session_id,
                Session.revoked_at.is_(None),
                Session.expires_at > now,
            )
            .values(revoked_at=now, revocation_reason=RevocationReason.revoke_others)
        )
        result = await self.session.exec(stmt)
        await self.session.flush()
        return result.rowcount

    async def rotate(
        self,
        old_session_id: UUID,
        user_id: UUID,
        new_session: Session,
        now: datetime,
    ) -> RotationOutcome:
        """
        Compare-and-revoke the old session, then insert its replacement.

        The conditional UPDATE is the serialization point: of two concurrent
        rotations of the same session only one can match `revoked_at IS NULL`.
        """
        stmt = (
            update(Session)
            .where(
                Session.id == old_session_id,
                Session.user_id == user_id,
                Session.revoked_at.is_(None),
                Session.expires_at > now,
            )
            .values(
                revoked_at=now,
                revocation_reason=RevocationReason.rotated,
                replaced_by=new_session.id,
            )
        )
        result = await self.session.exec(stmt)

        if result.rowcount == 1:
            await self.create(new_session)
            return RotationOutcome.rotated

        old_session = await self.get_by_id(old_session_id)
        if (
            old_session is None
            or old_session.user_id != user_id
            or old_session.revoked_at is None
        ):
            # Missing, someone else's, or simply expired
            return RotationOutcome.invalid

        if old_session.revocation_reason in SPENT_REASONS:
            return RotationOutcome.replay_detected
        return RotationOutcome.revoked

    async def delete_expired(self, before: datetime) -> int:
        """Retention cleanup: hard-delete sessions that expired before `before`"""
        stmt = delete(Session).where(Session.expires_at < before)
        result = await self.session.exec(stmt)
        await self.session.flush()
        return result.rowcount
