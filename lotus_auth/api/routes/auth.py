from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from lotus_auth.api.error import to_http_error
from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.password_hasher import PasswordHasher
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.app.use_cases.auth import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    Identity,
    LoginResponse,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RegisterResponse,
    RegisterUseCase,
)
from lotus_auth.app.use_cases.users import LoadContextUseCase, UserProfile
from lotus_auth.depends import (
    get_clock,
    get_current_identity,
    get_password_hasher,
    get_rate_limiter,
    get_token_service,
    get_unit_of_work,
)
from config import ApplicationConfig

router = APIRouter(prefix="/auth", tags=["Authentication"])


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Password complexity is checked by the use case so the error code is stable.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    device_id: str = Field(
        ..., min_length=1, max_length=255, description="Client device identifier"
    )


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    User Registration

    Creates a new user account and signs it in on the given device.

    Raises:
        - 400 Bad Request: INVALID_PASSWORD
        - 409 Conflict: EMAIL_ALREADY_EXISTS
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 429 Too Many Requests: RATE_LIMITED
    """
    use_case = RegisterUseCase(uow, token_service, password_hasher, rate_limiter, clock)
    result = await use_case.execute(
        request.email, request.password, request.device_id, client_ip(http_request)
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")
    device_id: str = Field(
        ..., min_length=1, max_length=255, description="Client device identifier"
    )


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    User Login

    Authenticates user and returns an access/refresh pair bound to a new session.

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 403 Forbidden: ACCOUNT_DISABLED
        - 429 Too Many Requests: RATE_LIMITED (with Retry-After)
    """
    use_case = LoginUseCase(uow, token_service, password_hasher, rate_limiter, clock)
    result = await use_case.execute(
        request.email, request.password, request.device_id, client_ip(http_request)
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class RefreshRequest(BaseModel):
    """
    Refresh token HTTP request payload

    Validates incoming refresh request.
    """

    refresh_token: str = Field(..., description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    clock: Clock = Depends(get_clock),
):
    """
    Refresh Token Rotation

    Exchanges a refresh token for a new pair. The presented token is spent;
    presenting it again revokes every session of the user.

    Raises:
        - 401 Unauthorized: INVALID_TOKEN, EXPIRED_TOKEN, SESSION_REVOKED, REPLAY_DETECTED
        - 403 Forbidden: ACCOUNT_DISABLED
    """
    use_case = RefreshTokenUseCase(
        uow, token_service, clock, replay_scope=ApplicationConfig.REPLAY_REVOKE_SCOPE
    )
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    clock: Clock = Depends(get_clock),
):
    """
    Logout

    Revokes the session behind the refresh token. Repeating it is not an error.

    Raises:
        - 401 Unauthorized: INVALID_TOKEN
    """
    use_case = LogoutUseCase(uow, token_service, clock)
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserProfile)
async def me(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User

    Raises:
        - 401 Unauthorized: missing, invalid, expired or revoked access token
    """
    use_case = LoadContextUseCase(uow)
    result = await use_case.execute(identity)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    old_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    request: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Change Password

    Replaces the password and revokes every session of the user, this one included.

    Raises:
        - 400 Bad Request: INVALID_PASSWORD
        - 401 Unauthorized: INVALID_CREDENTIALS or invalid access token
        - 429 Too Many Requests: RATE_LIMITED
    """
    use_case = ChangePasswordUseCase(uow, password_hasher, rate_limiter, clock)
    result = await use_case.execute(
        identity.user_id, request.old_password, request.new_password
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
