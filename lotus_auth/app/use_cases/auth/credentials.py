"""
Credential input rules shared by register and change-password.
"""

import re

from lotus_auth.domain.entities import AuthErrorCode
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return

MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

_PASSWORD_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[@$!%*?&]"),
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str) -> Result[None]:
    """
    Validate password complexity.

    Rules: 8+ characters, at most 72 bytes, and at least one lowercase
    letter, uppercase letter, digit and one of @$!%*?&.
    """
    if len(password) < MIN_PASSWORD_LENGTH or len(password.encode()) > MAX_PASSWORD_BYTES:
        return Return.err(auth_error(AuthErrorCode.INVALID_PASSWORD))

    if not all(pattern.search(password) for pattern in _PASSWORD_CLASSES):
        return Return.err(auth_error(AuthErrorCode.INVALID_PASSWORD))

    return Return.ok(None)
