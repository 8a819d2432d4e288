"""
Lotus Auth Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class TokenKind(str, Enum):
    """Bearer token kind, carried in the `typ` claim"""

    access = "access"
    refresh = "refresh"


class SessionState(str, Enum):
    """Lifecycle state of a session. Every state except active is terminal."""

    active = "active"
    rotated = "rotated"
    revoked = "revoked"
    expired = "expired"


class RevocationReason(str, Enum):
    """Why a session stopped being active"""

    rotated = "rotated"
    logout = "logout"
    password_changed = "password_changed"
    revoke_all = "revoke_all"
    revoke_others = "revoke_others"
    revoke_specific = "revoke_specific"
    replay_detected = "replay_detected"


class AuthErrorCode(str, Enum):
    """Error kinds surfaced to the HTTP layer"""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_TOKEN = "INVALID_TOKEN"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    SESSION_REVOKED = "SESSION_REVOKED"
    REPLAY_DETECTED = "REPLAY_DETECTED"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
