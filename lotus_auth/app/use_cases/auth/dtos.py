"""
Authentication Use Case DTOs (Data Transfer Objects)

Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from uuid import UUID

from pydantic import BaseModel

from lotus_auth.app.services.token_service import TokenPair


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(TokenPair):
    """Response for user login use case"""

    user_id: str


class RegisterResponse(TokenPair):
    """Response for user registration use case"""

    user_id: str
    email: str


class RefreshTokenResponse(TokenPair):
    """Response for refresh token use case"""


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    revoked: bool


class ChangePasswordResponse(BaseModel):
    """Response for change password use case"""

    sessions_revoked: int


class Identity(BaseModel):
    """Authenticated caller resolved from an access token"""

    user_id: UUID
    device_id: str
    session_id: UUID
