import pytest
from unittest.mock import AsyncMock, MagicMock

from lotus_auth.app.services.rate_limiter import ALLOWED
from tests.fixtures.clock import FrozenClock
from tests.fixtures.tokens import make_token_service


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.list_active_by_user_id = AsyncMock(return_value=[])
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.is_active = AsyncMock(return_value=True)
    uow.sessions.revoke = AsyncMock(return_value=True)
    uow.sessions.revoke_all_by_user_id = AsyncMock(return_value=0)
    uow.sessions.revoke_all_except_session = AsyncMock(return_value=0)
    uow.sessions.rotate = AsyncMock()
    uow.sessions.delete_expired = AsyncMock(return_value=0)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def token_service(clock):
    return make_token_service(clock)


@pytest.fixture
def password_hasher():
    """Hasher double: every password verifies unless a test says otherwise"""
    hasher = MagicMock()
    hasher.hash = AsyncMock(side_effect=lambda secret: f"hashed:{secret}")
    hasher.verify = AsyncMock(return_value=True)
    hasher.dummy_verify = AsyncMock()
    return hasher


@pytest.fixture
def rate_limiter():
    limiter = MagicMock()
    limiter.consume = AsyncMock(return_value=ALLOWED)
    limiter.release = AsyncMock()
    limiter.reset = AsyncMock()
    limiter.purge_stale = AsyncMock(return_value=0)
    return limiter
