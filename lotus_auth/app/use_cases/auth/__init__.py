"""
Authentication Use Cases

All token lifecycle business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .verify_access_use_case import VerifyAccessUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import (
    ChangePasswordResponse,
    Identity,
    LoginResponse,
    LogoutResponse,
    RefreshTokenResponse,
    RegisterResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyAccessUseCase",
    "ChangePasswordUseCase",
    # DTOs - Responses
    "RegisterResponse",
    "LoginResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "ChangePasswordResponse",
    "Identity",
]
