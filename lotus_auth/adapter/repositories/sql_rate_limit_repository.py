import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlmodel import delete, insert, update

from lotus_auth.app.repositories.rate_limit_repository import (
    IRateLimitRepository,
    RateLimitWindow,
)
from lotus_auth.domain.entities import RateLimitCounter

logger = logging.getLogger(__name__)

MAX_INCREMENT_RETRIES = 5


class SqlRateLimitRepository(IRateLimitRepository):
    """
    Rate-limit counters in the relational store.

    Every call runs in its own short transaction, so counted attempts survive
    the rollback of the request's unit of work.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @staticmethod
    def _key(action: str, identifier: str):
        return (
            RateLimitCounter.action == action,
            RateLimitCounter.identifier == identifier,
        )

    async def increment(
        self, action: str, identifier: str, now: datetime, window: timedelta
    ) -> RateLimitWindow:
        opened_after = now - window

        async with self.session_factory() as session:
            for _ in range(MAX_INCREMENT_RETRIES):
                # Open window: bump the counter
                stmt = (
                    update(RateLimitCounter)
                    .where(*self._key(action, identifier))
                    .where(RateLimitCounter.window_start > opened_after)
                    .values(attempts=RateLimitCounter.attempts + 1)
                    .returning(RateLimitCounter.attempts, RateLimitCounter.window_start)
                    .execution_options(synchronize_session=False)
                )
                row = (await session.exec(stmt)).first()

                if row is None:
                    # Closed window: restart it. Only one concurrent caller can match.
                    stmt = (
                        update(RateLimitCounter)
                        .where(*self._key(action, identifier))
                        .where(RateLimitCounter.window_start <= opened_after)
                        .values(attempts=1, window_start=now)
                        .returning(
                            RateLimitCounter.attempts, RateLimitCounter.window_start
                        )
                        .execution_options(synchronize_session=False)
                    )
                    row = (await session.exec(stmt)).first()

                if row is not None:
                    await session.commit()
                    return RateLimitWindow(attempts=row.attempts, window_start=row.window_start)

                # No counter yet
                try:
                    await session.exec(
                        insert(RateLimitCounter).values(
                            action=action,
                            identifier=identifier,
                            attempts=1,
                            window_start=now,
                        )
                    )
                    await session.commit()
                    return RateLimitWindow(attempts=1, window_start=now)
                except IntegrityError:
                    # A concurrent request created it first; count against that row
                    await session.rollback()

        raise RuntimeError(
            f"Could not record rate-limit attempt for action={action} after "
            f"{MAX_INCREMENT_RETRIES} tries"
        )

    async def release(self, action: str, identifier: str) -> None:
        async with self.session_factory() as session:
            await session.exec(
                update(RateLimitCounter)
                .where(*self._key(action, identifier))
                .where(RateLimitCounter.attempts > 0)
                .values(attempts=RateLimitCounter.attempts - 1)
                .execution_options(synchronize_session=False)
            )
            await session.commit()

    async def reset(self, action: str, identifier: str) -> None:
        async with self.session_factory() as session:
            await session.exec(delete(RateLimitCounter).where(*self._key(action, identifier)))
            await session.commit()

    async def purge_stale(self, before: datetime) -> int:
        async with self.session_factory() as session:
            result = await session.exec(
                delete(RateLimitCounter).where(RateLimitCounter.window_start < before)
            )
            await session.commit()
            if result.rowcount:
                logger.info(f"Purged {result.rowcount} stale rate-limit counter(s)")
            return result.rowcount
