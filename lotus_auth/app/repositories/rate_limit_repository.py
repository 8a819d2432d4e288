from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class RateLimitWindow:
    """Snapshot of one (action, identifier) counter"""

    attempts: int
    window_start: datetime


class IRateLimitRepository(ABC):
    """
    Attempt counter store - application layer.

    Implementations must make increment() a single atomic
    increment-and-read; callers never read, add and write back.
    """

    @abstractmethod
    async def increment(
        self, action: str, identifier: str, now: datetime, window: timedelta
    ) -> RateLimitWindow:
        """Count one attempt, restarting the window if it has closed"""
        pass

    @abstractmethod
    async def release(self, action: str, identifier: str) -> None:
        """Give back one counted attempt; never drops below zero"""
        pass

    @abstractmethod
    async def reset(self, action: str, identifier: str) -> None:
        """Forget all attempts for the pair"""
        pass

    @abstractmethod
    async def purge_stale(self, before: datetime) -> int:
        """Delete counters whose window started before the given instant"""
        pass
