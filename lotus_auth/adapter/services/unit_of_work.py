from sqlmodel.ext.asyncio.session import AsyncSession

from lotus_auth.adapter.repositories.audit_event_repository import AuditEventRepository
from lotus_auth.adapter.repositories.session_repository import SessionRepository
from lotus_auth.adapter.repositories.user_repository import UserRepository
from lotus_auth.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not explicitly committed is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
