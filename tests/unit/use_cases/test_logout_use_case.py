from uuid import uuid4

import pytest

from lotus_auth.app.use_cases.auth.logout_use_case import LogoutUseCase
from lotus_auth.domain.entities import RevocationReason


@pytest.fixture
def session_and_token(token_service):
    session = token_service.new_session(uuid4(), "device-a")
    return session, token_service.issue_pair(session).refresh_token


@pytest.mark.asyncio
async def test_logout_revokes_session(mock_uow, token_service, clock, session_and_token):
    session, token = session_and_token

    result = await LogoutUseCase(mock_uow, token_service, clock).execute(token)

    assert result.is_ok()
    assert result.value.revoked is True
    mock_uow.sessions.revoke.assert_called_once_with(
        session.id, clock.now(), RevocationReason.logout
    )
    assert mock_uow.audit_events.create.call_args.args[0].action == "logout"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_twice_is_not_an_error(mock_uow, token_service, clock, session_and_token):
    _, token = session_and_token
    mock_uow.sessions.revoke.return_value = False

    result = await LogoutUseCase(mock_uow, token_service, clock).execute(token)

    assert result.is_ok()
    assert result.value.revoked is False
    mock_uow.audit_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_logout_with_expired_token_is_a_no_op(
    mock_uow, token_service, clock, session_and_token
):
    _, token = session_and_token
    clock.advance(days=8)

    result = await LogoutUseCase(mock_uow, token_service, clock).execute(token)

    assert result.is_ok()
    assert result.value.revoked is False
    mock_uow.sessions.revoke.assert_not_called()


@pytest.mark.asyncio
async def test_logout_with_forged_token(mock_uow, token_service, clock):
    result = await LogoutUseCase(mock_uow, token_service, clock).execute("not-a-token")

    assert result.error.code == "INVALID_TOKEN"
    mock_uow.sessions.revoke.assert_not_called()
