"""
Login Use Case

Handles user authentication and returns a session-bound token pair.
"""

import logging
from typing import Optional

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.password_hasher import PasswordHasher
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return
from .credentials import normalize_email
from .dtos import LoginResponse

logger = logging.getLogger(__name__)

LOGIN_ACTION = "login"
LOGIN_IP_ACTION = "login_ip"


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Each attempt is claimed against the rate limit before the credential store is touched
    - Unknown email and wrong password give the same error and the same hashing work
    - Soft-deleted users are treated as unknown
    - Disabled status is only reported after the correct password
    - Attempts count against the email (and client IP when known) until they succeed
    - The right password clears the email counter and hands back the IP attempt
    - Success creates a session and updates last_login_at
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
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            device_id: Opaque client device identifier
            client_ip: Caller address, used as a second rate limit key

        Returns:
            Result with LoginResponse containing the token pair, or Error
        """
        email = normalize_email(email)

        limits = [(LOGIN_ACTION, email)]
        if client_ip:
            limits.append((LOGIN_IP_ACTION, client_ip))
        for action, identifier in limits:
            decision = await self.rate_limiter.consume(action, identifier)
            if not decision.allowed:
                return Return.err(
                    auth_error(
                        AuthErrorCode.RATE_LIMITED, retry_after=decision.retry_after
                    )
                )

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or not user.can_authenticate():
                await self.password_hasher.dummy_verify(password)
                logger.info("Login failed: unknown account")
                return Return.err(auth_error(AuthErrorCode.INVALID_CREDENTIALS))

            if not await self.password_hasher.verify(password, user.password_hash):
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="login_failed",
                        event_metadata={"device_id": device_id},
                        created_at=self.clock.now(),
                    )
                )
                await self.uow.commit()
                logger.info(f"Login failed: wrong password for user {user.id}")
                return Return.err(auth_error(AuthErrorCode.INVALID_CREDENTIALS))

            if user.is_disabled:
                logger.info(f"Login refused: user {user.id} is disabled")
                return Return.err(auth_error(AuthErrorCode.ACCOUNT_DISABLED))

            await self.rate_limiter.reset(LOGIN_ACTION, email)
            if client_ip:
                await self.rate_limiter.release(LOGIN_IP_ACTION, client_ip)

            session = self.token_service.new_session(user.id, device_id)
            await self.uow.sessions.create(session)

            user.last_login_at = self.clock.now()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="login",
                    event_metadata={
                        "device_id": device_id,
                        "session_id": str(session.id),
                    },
                    created_at=self.clock.now(),
                )
            )

            await self.uow.commit()

        pair = self.token_service.issue_pair(session)
        logger.info(f"User {user.id} logged in, session {session.id}")

        return Return.ok(LoginResponse(**pair.model_dump(), user_id=str(user.id)))
