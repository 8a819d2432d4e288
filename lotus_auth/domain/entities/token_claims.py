"""
Token Claims

Fixed, versioned claim set carried by every bearer token.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .enums import TokenKind


class TokenClaims(BaseModel):
    """Claims of one access or refresh token. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    device_id: str
    session_id: UUID
    kind: TokenKind
    version: int
    issued_at: datetime
    expires_at: datetime
