"""
Change Password Use Case

Replaces the user's password and signs out every device.
"""

import logging
from uuid import UUID

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.password_hasher import PasswordHasher
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode, RevocationReason
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return
from .credentials import validate_password
from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)

CHANGE_PASSWORD_ACTION = "change_password"


class ChangePasswordUseCase:
    """
    Use case for password change.

    Business Rules:
    - Rate limited per user
    - Every attempt is claimed against the limit before the old password is checked
    - Old password must verify; the right one clears the counter
    - New password must meet complexity rules
    - All of the user's sessions are revoked, including the caller's
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        clock: Clock,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.rate_limiter = rate_limiter
        self.clock = clock

    async def execute(
        self, user_id: UUID, old_password: str, new_password: str
    ) -> Result[ChangePasswordResponse]:
        identifier = str(user_id)

        policy = validate_password(new_password)
        if policy.is_err():
            return Return.err(policy.error)

        decision = await self.rate_limiter.consume(CHANGE_PASSWORD_ACTION, identifier)
        if not decision.allowed:
            return Return.err(
                auth_error(AuthErrorCode.RATE_LIMITED, retry_after=decision.retry_after)
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None or not user.can_authenticate():
                return Return.err(auth_error(AuthErrorCode.INVALID_CREDENTIALS))

            if not await self.password_hasher.verify(old_password, user.password_hash):
                return Return.err(auth_error(AuthErrorCode.INVALID_CREDENTIALS))

            await self.rate_limiter.reset(CHANGE_PASSWORD_ACTION, identifier)

            now = self.clock.now()
            user.password_hash = await self.password_hasher.hash(new_password)
            user.password_changed_at = now
            await self.uow.users.update(user)

            revoked_count = await self.uow.sessions.revoke_all_by_user_id(
                user.id, now, RevocationReason.password_changed
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_changed",
                    event_metadata={"sessions_revoked": revoked_count},
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(
            f"Password changed for user {user.id}, {revoked_count} session(s) revoked"
        )
        return Return.ok(ChangePasswordResponse(sessions_revoked=revoked_count))
