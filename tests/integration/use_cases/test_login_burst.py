import asyncio
from collections import Counter
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from lotus_auth.app.use_cases.auth.login_use_case import LoginUseCase
from lotus_auth.domain.entities import User, UserStatus


@pytest.fixture
def uow():
    """Credential store double; the rate limiter underneath is the real SQL one"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(
        return_value=User(
            id=uuid4(),
            email="user@lotus.app",
            password_hash="hashed:Secret123!",
            status=UserStatus.active,
        )
    )
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock()
    return uow


@pytest.fixture
def slow_hasher():
    async def verify(secret, digest):
        await asyncio.sleep(0.05)
        return secret == "Secret123!"

    hasher = MagicMock()
    hasher.verify = AsyncMock(side_effect=verify)
    hasher.dummy_verify = AsyncMock()
    return hasher


@pytest.mark.asyncio
async def test_concurrent_wrong_passwords_stop_at_limit(
    uow, slow_hasher, token_service, rate_limiter, clock
):
    use_case = LoginUseCase(uow, token_service, slow_hasher, rate_limiter, clock)

    results = await asyncio.gather(
        *(use_case.execute("user@lotus.app", "Wrong123!", "device-a") for _ in range(30))
    )

    codes = Counter(result.error.code for result in results)
    assert codes == {"INVALID_CREDENTIALS": 5, "RATE_LIMITED": 25}
    assert slow_hasher.verify.await_count == 5


@pytest.mark.asyncio
async def test_right_password_is_refused_once_burst_is_blocked(
    uow, slow_hasher, token_service, rate_limiter, clock
):
    use_case = LoginUseCase(uow, token_service, slow_hasher, rate_limiter, clock)
    await asyncio.gather(
        *(use_case.execute("user@lotus.app", "Wrong123!", "device-a") for _ in range(10))
    )

    blocked = await use_case.execute("user@lotus.app", "Secret123!", "device-a")
    assert blocked.error.code == "RATE_LIMITED"

    clock.advance(minutes=15)
    allowed = await use_case.execute("user@lotus.app", "Secret123!", "device-a")
    assert allowed.is_ok()
