"""
User Use Case DTOs
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Current user as returned by /auth/me"""

    id: str
    email: str
    status: str
    device_id: str
    session_id: str
    created_at: datetime
    last_login_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None


class SessionInfo(BaseModel):
    """One active session of the current user"""

    id: str
    device_id: str
    issued_at: datetime
    expires_at: datetime
    current: bool


class SessionList(BaseModel):
    sessions: List[SessionInfo]
