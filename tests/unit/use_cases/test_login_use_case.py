from datetime import datetime
from uuid import uuid4

import pytest

from lotus_auth.app.services.rate_limiter import RateLimitDecision
from lotus_auth.app.use_cases.auth.login_use_case import LoginUseCase
from lotus_auth.domain.entities import User, UserStatus


def make_user(**overrides):
    params = dict(
        id=uuid4(),
        email="user@lotus.app",
        password_hash="hashed:Secret123!",
        status=UserStatus.active,
    )
    params.update(overrides)
    return User(**params)


@pytest.fixture
def use_case(mock_uow, token_service, password_hasher, rate_limiter, clock):
    return LoginUseCase(mock_uow, token_service, password_hasher, rate_limiter, clock)


@pytest.mark.asyncio
async def test_successful_login(use_case, mock_uow, token_service, rate_limiter, clock):
    """Correct credentials create a session and return a pair bound to it"""
    user = make_user()
    mock_uow.users.get_by_email.return_value = user

    result = await use_case.execute("user@lotus.app", "Secret123!", "device-a", "10.0.0.1")

    assert result.is_ok()
    data = result.value
    assert data.user_id == str(user.id)

    claims = token_service.decode_access(data.access_token).value
    assert claims.user_id == user.id
    assert claims.device_id == "device-a"
    assert str(claims.session_id) == data.session_id

    created_session = mock_uow.sessions.create.call_args.args[0]
    assert created_session.user_id == user.id
    assert created_session.device_id == "device-a"

    assert user.last_login_at == clock.now()
    rate_limiter.reset.assert_called_once_with("login", "user@lotus.app")
    rate_limiter.release.assert_called_once_with("login_ip", "10.0.0.1")
    mock_uow.audit_events.create.assert_called_once()
    assert mock_uow.audit_events.create.call_args.args[0].action == "login"
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_login_normalizes_email(use_case, mock_uow):
    mock_uow.users.get_by_email.return_value = make_user()

    result = await use_case.execute("  User@Lotus.APP ", "Secret123!", "device-a")

    assert result.is_ok()
    mock_uow.users.get_by_email.assert_called_once_with("user@lotus.app")


@pytest.mark.asyncio
async def test_login_wrong_password(use_case, mock_uow, password_hasher, rate_limiter):
    """Wrong password keeps its claimed attempts and never creates a session"""
    mock_uow.users.get_by_email.return_value = make_user()
    password_hasher.verify.return_value = False

    result = await use_case.execute("user@lotus.app", "Wrong123!", "device-a", "10.0.0.1")

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.sessions.create.assert_not_called()
    rate_limiter.consume.assert_any_call("login", "user@lotus.app")
    rate_limiter.consume.assert_any_call("login_ip", "10.0.0.1")
    rate_limiter.reset.assert_not_called()
    rate_limiter.release.assert_not_called()


@pytest.mark.asyncio
async def test_login_unknown_email_matches_wrong_password(
    use_case, mock_uow, password_hasher, rate_limiter
):
    """Unknown email gives the same error and still spends hashing work"""
    mock_uow.users.get_by_email.return_value = None
    unknown = await use_case.execute("ghost@lotus.app", "Secret123!", "device-a")

    mock_uow.users.get_by_email.return_value = make_user()
    password_hasher.verify.return_value = False
    wrong = await use_case.execute("user@lotus.app", "Wrong123!", "device-a")

    assert unknown.error == wrong.error
    password_hasher.dummy_verify.assert_called_once_with("Secret123!")
    rate_limiter.consume.assert_any_call("login", "ghost@lotus.app")
    rate_limiter.reset.assert_not_called()


@pytest.mark.asyncio
async def test_login_soft_deleted_user_is_unknown(use_case, mock_uow, password_hasher):
    mock_uow.users.get_by_email.return_value = make_user(deleted_at=datetime(2025, 1, 1))

    result = await use_case.execute("user@lotus.app", "Secret123!", "device-a")

    assert result.error.code == "INVALID_CREDENTIALS"
    password_hasher.verify.assert_not_called()
    password_hasher.dummy_verify.assert_called_once()


@pytest.mark.asyncio
async def test_login_disabled_user_after_correct_password(use_case, mock_uow):
    mock_uow.users.get_by_email.return_value = make_user(status=UserStatus.disabled)

    result = await use_case.execute("user@lotus.app", "Secret123!", "device-a")

    assert result.error.code == "ACCOUNT_DISABLED"
    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_login_disabled_user_wrong_password_hides_status(
    use_case, mock_uow, password_hasher
):
    mock_uow.users.get_by_email.return_value = make_user(status=UserStatus.disabled)
    password_hasher.verify.return_value = False

    result = await use_case.execute("user@lotus.app", "Wrong123!", "device-a")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_rate_limited_skips_user_lookup(use_case, mock_uow, rate_limiter):
    rate_limiter.consume.return_value = RateLimitDecision(
        allowed=False, retry_after=600, attempts=6
    )

    result = await use_case.execute("user@lotus.app", "Secret123!", "device-a")

    assert result.error.code == "RATE_LIMITED"
    assert result.error.details["retry_after"] == 600
    mock_uow.users.get_by_email.assert_not_called()
    rate_limiter.reset.assert_not_called()


@pytest.mark.asyncio
async def test_login_checks_ip_limit(use_case, mock_uow, rate_limiter):
    blocked = RateLimitDecision(allowed=False, retry_after=30, attempts=20)
    rate_limiter.consume.side_effect = lambda action, identifier: (
        blocked if action == "login_ip" else RateLimitDecision(allowed=True)
    )

    result = await use_case.execute("user@lotus.app", "Secret123!", "device-a", "10.0.0.1")

    assert result.error.code == "RATE_LIMITED"
    mock_uow.users.get_by_email.assert_not_called()
