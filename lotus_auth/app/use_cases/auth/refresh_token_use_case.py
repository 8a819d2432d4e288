"""
Refresh Token Use Case

Rotates a refresh token: the presented session is spent and a new one issued.
"""

import logging

from lotus_auth.app.repositories.session_repository import RotationOutcome
from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent, AuthErrorCode, RevocationReason
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)

REPLAY_SCOPE_USER = "user"
REPLAY_SCOPE_DEVICE = "device"


class RefreshTokenUseCase:
    """
    Use case for refresh token rotation.

    Business Rules:
    - Each refresh token can be redeemed exactly once
    - Old session revoke and new session insert happen in one transaction
    - Presenting an already rotated token is a replay: every active session
      of the user (or of that device, with replay_scope="device") is revoked
    - A token whose session was revoked for any other reason is rejected
      without further revocation
    - Disabled or deleted users cannot refresh
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        clock: Clock,
        replay_scope: str = REPLAY_SCOPE_USER,
    ):
        self.uow = uow
        self.token_service = token_service
        self.clock = clock
        self.replay_scope = replay_scope

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: Refresh token from a previous login or refresh

        Returns:
            Result with RefreshTokenResponse containing the new pair, or Error
        """
        decoded = self.token_service.decode_refresh(refresh_token)
        if decoded.is_err():
            return Return.err(decoded.error)
        claims = decoded.value

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.user_id)
            if user is None or not user.can_authenticate():
                return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))
            if user.is_disabled:
                return Return.err(auth_error(AuthErrorCode.ACCOUNT_DISABLED))

            now = self.clock.now()
            new_session = self.token_service.new_session(user.id, claims.device_id)
            outcome = await self.uow.sessions.rotate(
                claims.session_id, user.id, new_session, now
            )

            if outcome == RotationOutcome.rotated:
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="token_refresh",
                        event_metadata={
                            "device_id": claims.device_id,
                            "old_session_id": str(claims.session_id),
                            "session_id": str(new_session.id),
                        },
                        created_at=now,
                    )
                )
                await self.uow.commit()

                pair = self.token_service.issue_pair(new_session)
                logger.info(
                    f"Session {claims.session_id} rotated to {new_session.id}"
                )
                return Return.ok(RefreshTokenResponse(**pair.model_dump()))

            if outcome == RotationOutcome.replay_detected:
                device_id = (
                    claims.device_id
                    if self.replay_scope == REPLAY_SCOPE_DEVICE
                    else None
                )
                revoked_count = await self.uow.sessions.revoke_all_by_user_id(
                    user.id, now, RevocationReason.replay_detected, device_id=device_id
                )
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="refresh_replay_detected",
                        event_metadata={
                            "device_id": claims.device_id,
                            "session_id": str(claims.session_id),
                            "revoked_count": revoked_count,
                        },
                        created_at=now,
                    )
                )
                await self.uow.commit()

                logger.warning(
                    f"Refresh token replay for session {claims.session_id}, "
                    f"revoked {revoked_count} session(s) of user {user.id}"
                )
                return Return.err(auth_error(AuthErrorCode.REPLAY_DETECTED))

            if outcome == RotationOutcome.revoked:
                return Return.err(auth_error(AuthErrorCode.SESSION_REVOKED))

            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))
