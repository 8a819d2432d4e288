"""
Register Use Case

Creates a user account and signs the new user in on the given device.
"""

import logging
from typing import Optional

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.password_hasher import PasswordHasher
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode, User, UserStatus
from lotus_auth.domain.errors import DuplicateEmailError, auth_error
from lotus_auth.libs.result import Result, Return
from .credentials import normalize_email, validate_password
from .dtos import RegisterResponse

logger = logging.getLogger(__name__)

REGISTER_ACTION = "register"


class RegisterUseCase:
    """
    Use case for account registration.

    Business Rules:
    - Rate limited per client IP (per email when no IP is known); only
      duplicate-email attempts stay counted
    - Email stored lower-cased and must be unique
    - Password must meet complexity rules
    - Registration opens the first session on the given device
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        password_hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        clock: Clock,
    ):
        self.uow = uow
        self.token_service = token_service
        self.password_hasher = password_hasher
        self.rate_limiter = rate_limiter
        self.clock = clock

    async def execute(
        self,
        email: str,
        password: str,
        device_id: str,
        client_ip: Optional[str] = None,
    ) -> Result[RegisterResponse]:
        email = normalize_email(email)
        identifier = client_ip or email

        policy = validate_password(password)
        if policy.is_err():
            return Return.err(policy.error)

        decision = await self.rate_limiter.consume(REGISTER_ACTION, identifier)
        if not decision.allowed:
            return Return.err(
                auth_error(AuthErrorCode.RATE_LIMITED, retry_after=decision.retry_after)
            )

        async with self.uow:
            existing = await self.uow.users.get_by_email(email)
            if existing is not None:
                return Return.err(auth_error(AuthErrorCode.EMAIL_ALREADY_EXISTS))

            now = self.clock.now()
            user = User(
                email=email,
                password_hash=await self.password_hasher.hash(password),
                status=UserStatus.active,
                created_at=now,
                last_login_at=now,
            )
            try:
                await self.uow.users.create(user)
            except DuplicateEmailError:
                return Return.err(auth_error(AuthErrorCode.EMAIL_ALREADY_EXISTS))

            session = self.token_service.new_session(user.id, device_id)
            await self.uow.sessions.create(session)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="register",
                    event_metadata={
                        "device_id": device_id,
                        "session_id": str(session.id),
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

        await self.rate_limiter.release(REGISTER_ACTION, identifier)
        pair = self.token_service.issue_pair(session)
        logger.info(f"User {user.id} registered")

        return Return.ok(
            RegisterResponse(**pair.model_dump(), user_id=str(user.id), email=email)
        )
