"""
Token Codec

Signs and parses bearer tokens (HS256 JWT) carrying a TokenClaims set.
"""

import logging
from datetime import UTC, datetime

from jose import JWTError, jwt
from pydantic import ValidationError

from lotus_auth.app.services.clock import Clock
from lotus_auth.domain.entities import AuthErrorCode, TokenClaims, TokenKind
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return

logger = logging.getLogger(__name__)


def to_epoch(value: datetime) -> int:
    return int(value.replace(tzinfo=UTC).timestamp())


def from_epoch(value: int) -> datetime:
    return datetime.fromtimestamp(value, UTC).replace(tzinfo=None)


class TokenCodec:
    """
    Encode and decode access/refresh tokens.

    Access and refresh tokens are signed with different secrets. Decoding
    checks, in order: signature (plus issuer and audience), expiry, format
    version, and token kind. Nothing in the payload is trusted before the
    signature has been verified.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        issuer: str,
        audience: str,
        version: int,
        clock: Clock,
        algorithm: str = "HS256",
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.issuer = issuer
        self.audience = audience
        self.version = version
        self.clock = clock
        self.algorithm = algorithm

    def _secret_for(self, kind: TokenKind) -> str:
        if kind == TokenKind.access:
            return self.access_secret
        return self.refresh_secret

    def encode(self, claims: TokenClaims) -> str:
        payload = {
            "sub": str(claims.user_id),
            "did": claims.device_id,
            "sid": str(claims.session_id),
            "typ": claims.kind.value,
            "ver": claims.version,
            "iat": to_epoch(claims.issued_at),
            "exp": to_epoch(claims.expires_at),
            "iss": self.issuer,
            "aud": self.audience,
        }
        return jwt.encode(payload, self._secret_for(claims.kind), algorithm=self.algorithm)

    def decode(self, token: str, expected_kind: TokenKind) -> Result[TokenClaims]:
        """
        Verify and parse a token.

        Args:
            token: Encoded token string
            expected_kind: Kind the caller requires (access or refresh)

        Returns:
            Result with TokenClaims, or INVALID_TOKEN / EXPIRED_TOKEN error
        """
        if not token or not isinstance(token, str):
            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

        try:
            payload = jwt.decode(
                token,
                self._secret_for(expected_kind),
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                # Expiry is checked below against the injected clock
                options={"verify_exp": False},
            )
        except JWTError as exc:
            logger.warning(f"Rejected {expected_kind.value} token: {exc}")
            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

        try:
            claims = TokenClaims(
                user_id=payload["sub"],
                device_id=payload["did"],
                session_id=payload["sid"],
                kind=payload["typ"],
                version=payload["ver"],
                issued_at=from_epoch(payload["iat"]),
                expires_at=from_epoch(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError, OverflowError, ValidationError):
            logger.warning(f"Rejected {expected_kind.value} token: malformed claims")
            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

        if claims.expires_at <= self.clock.now():
            return Return.err(auth_error(AuthErrorCode.EXPIRED_TOKEN))

        if claims.version != self.version:
            logger.warning(
                f"Rejected token with version {claims.version}, expected {self.version}"
            )
            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

        if claims.kind != expected_kind:
            logger.warning(
                f"Rejected {claims.kind.value} token where {expected_kind.value} was required"
            )
            return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

        return Return.ok(claims)
