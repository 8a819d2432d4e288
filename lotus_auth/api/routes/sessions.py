from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from lotus_auth.api.error import to_http_error
from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.app.use_cases.auth import Identity
from lotus_auth.app.use_cases.users import (
    ListSessionsUseCase,
    RevokeSessionsUseCase,
    SessionList,
)
from lotus_auth.depends import get_clock, get_current_identity, get_unit_of_work

router = APIRouter(prefix="/sessions", tags=["Sessions"])


class RevokeSessionResponse(BaseModel):
    """Response for session revocation operations"""

    message: str
    revoked_count: int


class RevokeSpecificSessionResponse(BaseModel):
    """Response for specific session revocation"""

    message: str
    session_id: str
    revoked: bool


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionList)
async def list_sessions(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    List Active Sessions

    Returns the caller's active sessions; the one behind this token has current=true.
    """
    use_case = ListSessionsUseCase(uow, clock)
    result = await use_case.execute(identity.user_id, identity.session_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionResponse,
)
async def revoke_all_sessions(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Revoke All Sessions

    Logs the caller out everywhere, including this session. Useful for:
    - Suspected account compromise
    - Lost devices
    """
    use_case = RevokeSessionsUseCase(uow, clock)
    result = await use_case.revoke_all_sessions(identity.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return RevokeSessionResponse(
        message="All sessions revoked successfully",
        revoked_count=result.value["revoked_count"],
    )


@router.post(
    "/revoke-others",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionResponse,
)
async def revoke_other_sessions(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Revoke Other Sessions

    Logs out every other device while keeping the current session active.
    """
    use_case = RevokeSessionsUseCase(uow, clock)
    result = await use_case.revoke_all_except_current(
        identity.session_id, identity.user_id
    )

    if result.is_err():
        raise to_http_error(result.error)

    return RevokeSessionResponse(
        message="Other sessions revoked successfully",
        revoked_count=result.value["revoked_count"],
    )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSpecificSessionResponse,
)
async def revoke_session(
    session_id: UUID,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Clock = Depends(get_clock),
):
    """
    Revoke Specific Session

    Raises:
        - 404 Not Found: SESSION_NOT_FOUND (also for sessions of other users)
    """
    use_case = RevokeSessionsUseCase(uow, clock)
    result = await use_case.revoke_specific_session(session_id, identity.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return RevokeSpecificSessionResponse(
        message="Session revoked successfully",
        session_id=result.value["session_id"],
        revoked=result.value["revoked"],
    )
