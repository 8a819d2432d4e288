"""
Verify Access Use Case

Resolves an access token to the calling identity.
"""

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.token_service import TokenService
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuthErrorCode
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return
from .dtos import Identity


class VerifyAccessUseCase:
    """
    Use case for access token verification.

    Business Rules:
    - Signature, issuer, audience, kind, version and expiry are always checked
    - Unless stateless, the bound session must still be active, so revocation
      takes effect before the access token expires
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        clock: Clock,
        stateless: bool = False,
    ):
        self.uow = uow
        self.token_service = token_service
        self.clock = clock
        self.stateless = stateless

    async def execute(self, access_token: str) -> Result[Identity]:
        decoded = self.token_service.decode_access(access_token)
        if decoded.is_err():
            return Return.err(decoded.error)
        claims = decoded.value

        if not self.stateless:
            async with self.uow:
                active = await self.uow.sessions.is_active(
                    claims.session_id, self.clock.now()
                )
            if not active:
                return Return.err(auth_error(AuthErrorCode.SESSION_REVOKED))

        return Return.ok(
            Identity(
                user_id=claims.user_id,
                device_id=claims.device_id,
                session_id=claims.session_id,
            )
        )
