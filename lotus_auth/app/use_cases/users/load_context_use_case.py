"""
Load Context Use Case

Loads the current user behind a verified access token.
"""

from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.app.use_cases.auth.dtos import Identity
from lotus_auth.domain.entities import AuthErrorCode
from lotus_auth.domain.errors import auth_error
from lotus_auth.libs.result import Result, Return
from .dtos import UserProfile


class LoadContextUseCase:
    """
    Use case for loading the current user.

    Business Rules:
    - Identity comes from a verified access token
    - User must exist and not be soft-deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, identity: Identity) -> Result[UserProfile]:
        async with self.uow:
            user = await self.uow.users.get_by_id(identity.user_id)
            if user is None or not user.can_authenticate():
                return Return.err(auth_error(AuthErrorCode.INVALID_TOKEN))

            return Return.ok(
                UserProfile(
                    id=str(user.id),
                    email=user.email,
                    status=user.status.value,
                    device_id=identity.device_id,
                    session_id=str(identity.session_id),
                    created_at=user.created_at,
                    last_login_at=user.last_login_at,
                    password_changed_at=user.password_changed_at,
                )
            )
