"""
Lotus Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AuthErrorCode,
    RevocationReason,
    SessionState,
    TokenKind,
    UserStatus,
)

# Export all entities
from .user import User
from .session import Session
from .rate_limit_counter import RateLimitCounter
from .audit_event import AuditEvent
from .token_claims import TokenClaims

__all__ = [
    # Enums
    "AuthErrorCode",
    "RevocationReason",
    "SessionState",
    "TokenKind",
    "UserStatus",
    # Entities
    "User",
    "Session",
    "RateLimitCounter",
    "AuditEvent",
    "TokenClaims",
]
