from uuid import uuid4

import pytest

from lotus_auth.app.use_cases.auth.verify_access_use_case import VerifyAccessUseCase


@pytest.fixture
def session_and_token(token_service):
    session = token_service.new_session(uuid4(), "device-a")
    return session, token_service.issue_pair(session).access_token


@pytest.mark.asyncio
async def test_verify_returns_identity(mock_uow, token_service, clock, session_and_token):
    session, token = session_and_token

    result = await VerifyAccessUseCase(mock_uow, token_service, clock).execute(token)

    assert result.is_ok()
    assert result.value.user_id == session.user_id
    assert result.value.device_id == "device-a"
    assert result.value.session_id == session.id
    mock_uow.sessions.is_active.assert_called_once_with(session.id, clock.now())


@pytest.mark.asyncio
async def test_verify_rejects_revoked_session(
    mock_uow, token_service, clock, session_and_token
):
    _, token = session_and_token
    mock_uow.sessions.is_active.return_value = False

    result = await VerifyAccessUseCase(mock_uow, token_service, clock).execute(token)

    assert result.error.code == "SESSION_REVOKED"


@pytest.mark.asyncio
async def test_stateless_verify_skips_session_lookup(
    mock_uow, token_service, clock, session_and_token
):
    _, token = session_and_token
    mock_uow.sessions.is_active.return_value = False

    use_case = VerifyAccessUseCase(mock_uow, token_service, clock, stateless=True)
    result = await use_case.execute(token)

    assert result.is_ok()
    mock_uow.sessions.is_active.assert_not_called()


@pytest.mark.asyncio
async def test_verify_rejects_refresh_token(mock_uow, token_service, clock):
    session = token_service.new_session(uuid4(), "device-a")
    refresh_token = token_service.issue_pair(session).refresh_token

    result = await VerifyAccessUseCase(mock_uow, token_service, clock).execute(refresh_token)

    assert result.error.code == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_verify_rejects_expired_token(mock_uow, token_service, clock, session_and_token):
    _, token = session_and_token
    clock.advance(minutes=15)

    result = await VerifyAccessUseCase(mock_uow, token_service, clock).execute(token)

    assert result.error.code == "EXPIRED_TOKEN"
    mock_uow.sessions.is_active.assert_not_called()
