"""
Authentication error kinds.

Messages are fixed per code so no response can tell an unknown email from a
wrong password, or a forged token from an expired session.
"""

from lotus_auth.domain.entities.enums import AuthErrorCode
from lotus_auth.libs.result import Error

ERROR_MESSAGES = {
    AuthErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    AuthErrorCode.RATE_LIMITED: "Too many attempts, please try again later",
    AuthErrorCode.INVALID_TOKEN: "Invalid token",
    AuthErrorCode.EXPIRED_TOKEN: "Token has expired",
    AuthErrorCode.SESSION_REVOKED: "Session is no longer active",
    AuthErrorCode.REPLAY_DETECTED: "Refresh token reuse detected, please log in again",
    AuthErrorCode.ACCOUNT_DISABLED: "User account is disabled",
    AuthErrorCode.INVALID_PASSWORD: "Password does not meet complexity requirements",
    AuthErrorCode.EMAIL_ALREADY_EXISTS: "A user with this email address already exists",
    AuthErrorCode.SESSION_NOT_FOUND: "Session not found",
}


def auth_error(code: AuthErrorCode, **details) -> Error:
    return Error(code.value, ERROR_MESSAGES[code], details)


class DuplicateEmailError(Exception):
    """Raised by the user store when the email is already taken"""
