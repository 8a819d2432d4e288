"""
User Management Use Cases

Current-user context and session management.
"""

from .load_context_use_case import LoadContextUseCase
from .list_sessions_use_case import ListSessionsUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .dtos import SessionInfo, SessionList, UserProfile

__all__ = [
    "LoadContextUseCase",
    "ListSessionsUseCase",
    "RevokeSessionsUseCase",
    "SessionInfo",
    "SessionList",
    "UserProfile",
]
