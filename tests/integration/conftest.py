import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import lotus_auth.domain.entities  # noqa: F401  registers tables on the metadata
from config import ApplicationConfig
from lotus_auth.adapter.repositories.sql_rate_limit_repository import (
    SqlRateLimitRepository,
)
from lotus_auth.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from lotus_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.depends import (
    get_clock,
    get_password_hasher,
    get_rate_limiter,
    get_token_service,
    get_unit_of_work,
)
from tests.fixtures.clock import FrozenClock
from tests.fixtures.tokens import make_token_service


@pytest_asyncio.fixture
async def engine(tmp_path):
    # File database: the rate-limit store opens its own connections
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def token_service(clock):
    return make_token_service(clock)


@pytest.fixture
def rate_limiter(session_factory, clock):
    return RateLimiter.from_config(
        SqlRateLimitRepository(session_factory), ApplicationConfig.RATE_LIMITS, clock
    )


@pytest_asyncio.fixture
async def client(db_session, clock, token_service, rate_limiter):
    from lotus_auth.api.app import create_app

    app = create_app(ApplicationConfig)
    password_hasher = BcryptPasswordHasher(cost_factor=4)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
