import asyncio
from datetime import datetime, timedelta

import pytest

from lotus_auth.adapter.repositories.sql_rate_limit_repository import (
    SqlRateLimitRepository,
)
from lotus_auth.domain.entities import RateLimitCounter

NOW = datetime(2026, 1, 1, 12, 0, 0)
WINDOW = timedelta(minutes=15)


@pytest.fixture
def repository(session_factory):
    return SqlRateLimitRepository(session_factory)


async def stored(session_factory, action, identifier):
    async with session_factory() as session:
        return await session.get(RateLimitCounter, (action, identifier))


@pytest.mark.asyncio
async def test_first_attempt_opens_window(repository, session_factory):
    window = await repository.increment("login", "user@lotus.app", NOW, WINDOW)

    assert window.attempts == 1
    assert window.window_start == NOW
    counter = await stored(session_factory, "login", "user@lotus.app")
    assert counter.attempts == 1
    assert counter.window_start == NOW


@pytest.mark.asyncio
async def test_attempts_accumulate_in_open_window(repository):
    for minute in range(5):
        window = await repository.increment(
            "login", "user@lotus.app", NOW + timedelta(minutes=minute), WINDOW
        )

    assert window.attempts == 5
    assert window.window_start == NOW


@pytest.mark.asyncio
async def test_closed_window_restarts(repository):
    await repository.increment("login", "user@lotus.app", NOW, WINDOW)
    await repository.increment("login", "user@lotus.app", NOW, WINDOW)

    later = NOW + WINDOW
    window = await repository.increment("login", "user@lotus.app", later, WINDOW)

    assert window.attempts == 1
    assert window.window_start == later


@pytest.mark.asyncio
async def test_counters_are_per_action_and_identifier(repository):
    await repository.increment("login", "a@lotus.app", NOW, WINDOW)
    await repository.increment("login", "a@lotus.app", NOW, WINDOW)
    other = await repository.increment("login", "b@lotus.app", NOW, WINDOW)
    register = await repository.increment("register", "a@lotus.app", NOW, WINDOW)

    assert other.attempts == 1
    assert register.attempts == 1


@pytest.mark.asyncio
async def test_concurrent_increments_are_all_counted(repository, session_factory):
    windows = await asyncio.gather(
        *(repository.increment("login", "user@lotus.app", NOW, WINDOW) for _ in range(20))
    )

    assert sorted(window.attempts for window in windows) == list(range(1, 21))
    counter = await stored(session_factory, "login", "user@lotus.app")
    assert counter.attempts == 20


@pytest.mark.asyncio
async def test_release_gives_back_one_attempt(repository, session_factory):
    await repository.increment("login_ip", "10.0.0.1", NOW, WINDOW)
    await repository.increment("login_ip", "10.0.0.1", NOW, WINDOW)

    await repository.release("login_ip", "10.0.0.1")
    counter = await stored(session_factory, "login_ip", "10.0.0.1")
    assert counter.attempts == 1
    assert counter.window_start == NOW

    await repository.release("login_ip", "10.0.0.1")
    await repository.release("login_ip", "10.0.0.1")
    counter = await stored(session_factory, "login_ip", "10.0.0.1")
    assert counter.attempts == 0


@pytest.mark.asyncio
async def test_release_without_counter_is_noop(repository, session_factory):
    await repository.release("login_ip", "10.0.0.1")

    assert await stored(session_factory, "login_ip", "10.0.0.1") is None


@pytest.mark.asyncio
async def test_reset_deletes_counter(repository, session_factory):
    await repository.increment("login", "user@lotus.app", NOW, WINDOW)

    await repository.reset("login", "user@lotus.app")

    assert await stored(session_factory, "login", "user@lotus.app") is None


@pytest.mark.asyncio
async def test_purge_stale(repository, session_factory):
    await repository.increment("login", "old@lotus.app", NOW - timedelta(hours=2), WINDOW)
    await repository.increment("login", "new@lotus.app", NOW, WINDOW)

    purged = await repository.purge_stale(NOW - timedelta(hours=1))

    assert purged == 1
    assert await stored(session_factory, "login", "old@lotus.app") is None
    assert await stored(session_factory, "login", "new@lotus.app") is not None
