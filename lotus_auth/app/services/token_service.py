"""
Token Service

Mints sessions and the access/refresh pair bound to them.
"""

from datetime import datetime, timedelta
from uuid import UUID

from pydantic import BaseModel

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.token_codec import TokenCodec
from lotus_auth.domain.entities import Session, TokenClaims, TokenKind
from lotus_auth.libs.result import Result


class TokenPair(BaseModel):
    """Signed access/refresh pair bound to one session"""

    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime
    session_id: str


class TokenService:
    """
    Issues and decodes bearer tokens.

    Business Rules:
    - Refresh token lifetime equals the session lifetime
    - Access token never outlives its session
    - Timestamps are truncated to whole seconds, as carried in the JWT
    """

    def __init__(
        self,
        codec: TokenCodec,
        clock: Clock,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
    ):
        self.codec = codec
        self.clock = clock
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _now(self) -> datetime:
        return self.clock.now().replace(microsecond=0)

    def new_session(self, user_id: UUID, device_id: str) -> Session:
        now = self._now()
        return Session(
            user_id=user_id,
            device_id=device_id,
            issued_at=now,
            expires_at=now + self.refresh_ttl,
        )

    def issue_pair(self, session: Session) -> TokenPair:
        now = self._now()
        access_expires_at = min(now + self.access_ttl, session.expires_at)

        access_token = self.codec.encode(
            TokenClaims(
                user_id=session.user_id,
                device_id=session.device_id,
                session_id=session.id,
                kind=TokenKind.access,
                version=self.codec.version,
                issued_at=now,
                expires_at=access_expires_at,
            )
        )
        refresh_token = self.codec.encode(
            TokenClaims(
                user_id=session.user_id,
                device_id=session.device_id,
                session_id=session.id,
                kind=TokenKind.refresh,
                version=self.codec.version,
                issued_at=session.issued_at,
                expires_at=session.expires_at,
            )
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_expires_at,
            refresh_expires_at=session.expires_at,
            session_id=str(session.id),
        )

    def decode_access(self, token: str) -> Result[TokenClaims]:
        return self.codec.decode(token, TokenKind.access)

    def decode_refresh(self, token: str) -> Result[TokenClaims]:
        return self.codec.decode(token, TokenKind.refresh)
