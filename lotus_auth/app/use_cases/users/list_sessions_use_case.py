"""
List Sessions Use Case
"""

from uuid import UUID

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.libs.result import Result, Return
from .dtos import SessionInfo, SessionList


class ListSessionsUseCase:
    """Lists the caller's active sessions, newest first, flagging the current one"""

    def __init__(self, uow: UnitOfWork, clock: Clock):
        self.uow = uow
        self.clock = clock

    async def execute(self, user_id: UUID, current_session_id: UUID) -> Result[SessionList]:
        async with self.uow:
            sessions = await self.uow.sessions.list_active_by_user_id(
                user_id, self.clock.now()
            )

            return Return.ok(
                SessionList(
                    sessions=[
                        SessionInfo(
                            id=str(session.id),
                            device_id=session.device_id,
                            issued_at=session.issued_at,
                            expires_at=session.expires_at,
                            current=session.id == current_session_id,
                        )
                        for session in sessions
                    ]
                )
            )
