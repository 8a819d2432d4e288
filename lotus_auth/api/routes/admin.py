"""
Admin API Routes - Maintenance Endpoints

These endpoints are for schedulers and internal services.
Authentication is via Admin API Key, not user access tokens.
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, status

from config import ApplicationConfig
from lotus_auth.api.error import to_http_error
from lotus_auth.api.utils.admin_auth import verify_admin_api_key
from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.app.use_cases.admin import (
    PurgeExpiredSessionsResponse,
    PurgeExpiredSessionsUseCase,
)
from lotus_auth.depends import get_clock, get_rate_limiter, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/sessions/purge",
    status_code=status.HTTP_200_OK,
    response_model=PurgeExpiredSessionsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_expired_sessions(
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Clock = Depends(get_clock),
):
    """
    Purge Expired Sessions

    Deletes sessions past the retention window (SESSION_RETENTION_DAYS after
    expiry) and rate-limit counters whose windows have closed.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
    """
    use_case = PurgeExpiredSessionsUseCase(
        uow,
        rate_limiter,
        clock,
        retention=timedelta(days=ApplicationConfig.SESSION_RETENTION_DAYS),
    )
    result = await use_case.execute()

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
