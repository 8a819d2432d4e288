"""
Logout Use Case

Revokes the session behind a refresh token.
"""

import logging

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode, RevocationReason
from lotus_auth.libs.result import Result, Return
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Use case for logout.

    Business Rules:
    - Idempotent: logging out an already revoked session succeeds
    - An expired but authentic token is a successful no-op
    - Forged or malformed tokens are rejected
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService, clock: Clock):
        self.uow = uow
        self.token_service = token_service
        self.clock = clock

    async def execute(self, refresh_token: str) -> Result[LogoutResponse]:
        decoded = self.token_service.decode_refresh(refresh_token)
        if decoded.is_err():
            if decoded.error.code == AuthErrorCode.EXPIRED_TOKEN.value:
                return Return.ok(LogoutResponse(revoked=False))
            return Return.err(decoded.error)
        claims = decoded.value

        async with self.uow:
            now = self.clock.now()
            revoked = await self.uow.sessions.revoke(
                claims.session_id, now, RevocationReason.logout
            )
            if revoked:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=claims.user_id,
                        action="logout",
                        event_metadata={
                            "device_id": claims.device_id,
                            "session_id": str(claims.session_id),
                        },
                        created_at=now,
                    )
                )
            await self.uow.commit()

        if revoked:
            logger.info(f"Session {claims.session_id} logged out")

        return Return.ok(LogoutResponse(revoked=revoked))
