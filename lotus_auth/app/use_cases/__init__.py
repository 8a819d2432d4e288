"""
Use Cases

Organized into domain folders:
- auth/: Token lifecycle (register, login, refresh, logout, verify, change password)
- users/: Current user context and session management
- admin/: Maintenance operations
"""

from .auth import (
    ChangePasswordUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    RegisterUseCase,
    VerifyAccessUseCase,
)
from .users import (
    ListSessionsUseCase,
    LoadContextUseCase,
    RevokeSessionsUseCase,
)
from .admin import PurgeExpiredSessionsUseCase

__all__ = [
    # Auth
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyAccessUseCase",
    "ChangePasswordUseCase",
    # Users
    "LoadContextUseCase",
    "ListSessionsUseCase",
    "RevokeSessionsUseCase",
    # Admin
    "PurgeExpiredSessionsUseCase",
]
