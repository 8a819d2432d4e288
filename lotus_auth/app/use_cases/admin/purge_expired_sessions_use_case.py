"""
Use Case: Purge Expired Sessions

Retention cleanup for session rows and closed rate-limit windows.
"""

import logging
from datetime import timedelta

from pydantic import BaseModel

from lotus_auth.app.services.clock import Clock
from lotus_auth.app.services.rate_limiter import RateLimiter
from lotus_auth.app.services.unit_of_work import UnitOfWork
from lotus_auth.domain.entities import AuditEvent
from lotus_auth.libs.result import Result, Return

logger = logging.getLogger(__name__)


class PurgeExpiredSessionsResponse(BaseModel):
    """Response DTO for PurgeExpiredSessionsUseCase"""

    sessions_purged: int
    rate_limit_counters_purged: int


class PurgeExpiredSessionsUseCase:
    """
    Delete records nobody can use anymore.

    Business Logic:
    1. Delete sessions that expired more than `retention` ago
       (revoked-but-unexpired rows are kept so replays are still detected)
    2. Delete rate-limit counters whose window closed under every policy
    3. Record an audit event with the counts
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        clock: Clock,
        retention: timedelta,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.clock = clock
        self.retention = retention

    async def execute(self) -> Result[PurgeExpiredSessionsResponse]:
        now = self.clock.now()

        async with self.uow:
            sessions_purged = await self.uow.sessions.delete_expired(now - self.retention)
            await self.uow.audit_events.create(
                AuditEvent(
                    action="purge_expired_sessions",
                    event_metadata={"sessions_purged": sessions_purged},
                    created_at=now,
                )
            )
            await self.uow.commit()

        counters_purged = await self.rate_limiter.purge_stale()

        logger.info(
            f"Purged {sessions_purged} session(s) and "
            f"{counters_purged} rate limit counter(s)"
        )
        return Return.ok(
            PurgeExpiredSessionsResponse(
                sessions_purged=sessions_purged,
                rate_limit_counters_purged=counters_purged,
            )
        )
