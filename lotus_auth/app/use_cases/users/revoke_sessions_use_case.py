"""
Revoke Sessions Use Case

Handles session revocation for security and session management.
"""

import logging
from uuid import UUID

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode, RevocationReason
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return

logger = logging.getLogger(__name__)


class RevokeSessionsUseCase:
    """
    Use case for revoking the caller's sessions.

    Business Rules:
    - Users can only revoke their own sessions
    - Revocation is idempotent and audit-logged
    - Three revocation modes: all, specific, all-except-current
    """

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def revoke_all_sessions(self, user_id: UUID) -> Result[dict]:
        """
        Revoke all sessions for a user (log out everywhere).

        Args:
            user_id: User whose sessions will be revoked

        Returns:
            Result with count of revoked sessions
        """
        async with self.uow:
            now = self.clock.now()
            count = await self.uow.sessions.revoke_all_by_user_id(
                user_id, now, RevocationReason.revoke_all
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="revoke_all_sessions",
                    event_metadata={"revoked_count": count},
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(f"Revoked {count} session(s) of user {user_id}")
        return Return.ok({"revoked_count": count})

    async def revoke_specific_session(
        self, session_id: UUID, requesting_user_id: UUID
    ) -> Result[dict]:
        """
        Revoke a specific session by ID.

        Sessions of other users are reported as not found.

        Returns:
            Result with revoked flag (False if it was already inactive), or Error
        """
        async with self.uow:
            session = await self.uow.sessions.get_by_id(session_id)
            if session is None or session.user_id != requesting_user_id:
                return Return.err(auth_error(AuthErrorCode.SESSION_NOT_FOUND))

            now = self.clock.now()
            revoked = await self.uow.sessions.revoke(
                session_id, now, RevocationReason.revoke_specific
            )

            if revoked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=requesting_user_id,
                        action="revoke_session",
                        event_metadata={
                            "session_id": str(session_id),
                            "device_id": session.device_id,
                        },
                        created_at=now,
                    )
                )

            await self.uow.commit()

        return Return.ok({"session_id": str(session_id), "revoked": revoked})

    async def revoke_all_except_current(
        self, current_session_id: UUID, requesting_user_id: UUID
    ) -> Result[dict]:
        """
        Revoke all sessions for the user except the current session.

        This is a self-service operation (logout other devices).
        """
        async with self.uow:
            now = self.clock.now()
            count = await self.uow.sessions.revoke_all_except_session(
                requesting_user_id, current_session_id, now
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=requesting_user_id,
                    action="revoke_other_sessions",
                    event_metadata={
                        "kept_session_id": str(current_session_id),
                        "revoked_count": count,
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

        return Return.ok(
            {"revoked_count": count, "kept_session_id": str(current_session_id)}
        )
