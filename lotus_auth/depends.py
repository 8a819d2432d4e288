from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from lotus_auth.adapter.repositories.redis_rate_limit_repository import (
    RedisRateLimitRepository,
)
from lotus_auth.adapter.repositories.sql_rate_limit_repository import (
    SqlRateLimitRepository,
)
from lotus_auth.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from lotus_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from lotus_auth.api.error import to_http_error
from lotus_auth.app.repositories.rate_limit_repository import IRateLimitRepository
from lotus_auth.app.services.clock import Clock, SystemClock
from lotus_auth.app.services.password_hasher import PasswordHasher
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.token_codec import TokenCodec
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.app.use_cases.auth import Identity, VerifyAccessUseCase
from lotus_auth.domain.entities import AuthErrorCode
from lotus_auth.domain.errors import auth_error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

clock = SystemClock()
password_hasher = BcryptPasswordHasher(ApplicationConfig.HASH_COST_FACTOR)
token_service = TokenService(
    TokenCodec(
        access_secret=ApplicationConfig.JWT_SECRET,
        refresh_secret=ApplicationConfig.JWT_REFRESH_SECRET,
        issuer=ApplicationConfig.JWT_ISSUER,
        audience=ApplicationConfig.JWT_AUDIENCE,
        version=ApplicationConfig.TOKEN_VERSION,
        clock=clock,
    ),
    clock,
    access_ttl=timedelta(seconds=ApplicationConfig.ACCESS_TOKEN_TTL_SECONDS),
    refresh_ttl=timedelta(seconds=ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS),
)


def build_rate_limit_store(backend: str) -> IRateLimitRepository:
    if backend == "redis":
        return RedisRateLimitRepository.from_url(ApplicationConfig.REDIS_URL)
    if backend == "sql":
        return SqlRateLimitRepository(AsyncSessionLocal)
    raise ValueError(f"Unsupported CACHE_BACKEND: {backend}")


rate_limiter = RateLimiter.from_config(
    build_rate_limit_store(ApplicationConfig.CACHE_BACKEND),
    ApplicationConfig.RATE_LIMITS,
    clock,
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return clock


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_token_service() -> TokenService:
    return token_service


def get_rate_limiter() -> RateLimiter:
    return rate_limiter


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    clock: Clock = Depends(get_clock),
) -> Identity:
    """
    Dependency to extract and verify the access token from the Authorization header.

    Returns:
        Identity (user_id, device_id, session_id) of the caller

    Raises:
        ClientError: 401 if the token is missing, invalid, expired or its
        session is no longer active
    """
    if credentials is None:
        raise to_http_error(auth_error(AuthErrorCode.INVALID_TOKEN))

    use_case = VerifyAccessUseCase(
        uow,
        token_service,
        clock,
        stateless=ApplicationConfig.ACCESS_TOKEN_STATELESS,
    )
    result = await use_case.execute(credentials.credentials)
    if result.is_err():
        raise to_http_error(result.error)

    return result.value
