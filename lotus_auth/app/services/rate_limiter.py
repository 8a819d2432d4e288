"""
Login Rate Limiter

Fixed-window attempt counter per (action, identifier) with lockout.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Mapping

from lotus_auth.app.repositories.rate_limit_repository import (
    IRateLimitRepository,
    RateLimitWindow,
)
from lotus_auth.app.services.clock import Clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    max_attempts: int
    window: timedelta

    @classmethod
    def from_config(cls, raw: Mapping) -> "RateLimitPolicy":
        return cls(
            max_attempts=int(raw["max_attempts"]),
            window=timedelta(seconds=int(raw["window_seconds"])),
        )


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0
    attempts: int = 0


ALLOWED = RateLimitDecision(allowed=True)


def normalize_identifier(identifier: str) -> str:
    return identifier.strip().lower()


class RateLimiter:
    """
    Per-action fixed-window limiter.

    Business Rules:
    - Every attempt is claimed up front with one atomic increment
    - The first attempt starts the window with attempts=1
    - An attempt is blocked when its claim lands past max_attempts in an open window
    - retry_after is the number of seconds left in the window (at least 1)
    - A successful attempt is handed back (release) or clears the counter (reset)
    - Actions without a policy are never limited
    """

    def __init__(
        self,
        store: IRateLimitRepository,
        policies: Dict[str, RateLimitPolicy],
        clock: Clock,
    ):
        self.store = store
        self.policies = policies
        self.clock = clock

    @classmethod
    def from_config(
        cls, store: IRateLimitRepository, rate_limits: Mapping, clock: Clock
    ) -> "RateLimiter":
        policies = {
            action: RateLimitPolicy.from_config(raw) for action, raw in rate_limits.items()
        }
        return cls(store, policies, clock)

    def _decide(
        self, policy: RateLimitPolicy, window: RateLimitWindow, now: datetime
    ) -> RateLimitDecision:
        if window.attempts <= policy.max_attempts:
            return RateLimitDecision(allowed=True, attempts=window.attempts)

        remaining = (window.window_start + policy.window - now).total_seconds()
        return RateLimitDecision(
            allowed=False,
            retry_after=max(1, math.ceil(remaining)),
            attempts=window.attempts,
        )

    async def consume(self, action: str, identifier: str) -> RateLimitDecision:
        """
        Claim one attempt and decide whether it may proceed.

        The claim is a single increment-and-read in the store; the decision is
        made on the count that increment returned, never on an earlier read.

        Args:
            action: Policy name, e.g. "login"
            identifier: Email, IP address or user id the attempt is keyed on

        Returns:
            RateLimitDecision (allowed, or blocked with retry_after seconds)
        """
        policy = self.policies.get(action)
        if policy is None:
            return ALLOWED

        now = self.clock.now()
        window = await self.store.increment(
            action, normalize_identifier(identifier), now, policy.window
        )
        decision = self._decide(policy, window, now)
        if not decision.allowed:
            logger.warning(
                f"Rate limit active for action={action} "
                f"(attempts={decision.attempts}, retry_after={decision.retry_after}s)"
            )
        return decision

    async def release(self, action: str, identifier: str) -> None:
        """Hand back an attempt that succeeded; successful requests are not counted"""
        if action in self.policies:
            await self.store.release(action, normalize_identifier(identifier))

    async def reset(self, action: str, identifier: str) -> None:
        """Forget every attempt for the pair, e.g. after the right password"""
        if action in self.policies:
            await self.store.reset(action, normalize_identifier(identifier))

    async def purge_stale(self) -> int:
        """Delete counters whose windows have closed under every policy"""
        if not self.policies:
            return 0
        longest = max(policy.window for policy in self.policies.values())
        return await self.store.purge_stale(self.clock.now() - longest)
