import hashlib
import math
from datetime import UTC, datetime, timedelta

import redis.asyncio as aioredis

from lotus_auth.app.repositories.rate_limit_repository import (
    IRateLimitRepository,
    RateLimitWindow,
)


def _to_timestamp(value: datetime) -> float:
    return value.replace(tzinfo=UTC).timestamp()


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(float(value), UTC).replace(tzinfo=None)


class RedisRateLimitRepository(IRateLimitRepository):
    """Rate-limit counters in Redis, one hash per (action, identifier)."""

    # Fixed-window increment; restart and bump happen in one atomic script.
    # window_start comes back as a string because Lua truncates numbers to integers.
    _INCREMENT_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])

local data = redis.call('HMGET', key, 'attempts', 'window_start')
local attempts = tonumber(data[1])
local start = tonumber(data[2])

if attempts == nil or start == nil or now >= start + window then
  attempts = 1
  start = now
  redis.call('HSET', key, 'attempts', attempts, 'window_start', ARGV[1])
else
  attempts = redis.call('HINCRBY', key, 'attempts', 1)
end

redis.call('EXPIRE', key, math.max(1, math.ceil(start + window - now)))
return {attempts, tostring(start)}
"""

    # Give back one attempt without touching the window or its TTL
    _RELEASE_SCRIPT = """
local attempts = tonumber(redis.call('HGET', KEYS[1], 'attempts'))
if attempts and attempts > 0 then
  return redis.call('HINCRBY', KEYS[1], 'attempts', -1)
end
return 0
"""

    def __init__(self, client: aioredis.Redis):
        self.client = client
        self._increment = self.client.register_script(self._INCREMENT_SCRIPT)
        self._release = self.client.register_script(self._RELEASE_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str, *, socket_timeout: float = 5.0):
        client = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    @staticmethod
    def _key(action: str, identifier: str) -> str:
        # Hash the identifier so emails and IPs cannot inject key delimiters
        digest = hashlib.sha256(identifier.encode()).hexdigest()
        return f"ratelimit:{action}:{digest}"

    async def increment(
        self, action: str, identifier: str, now: datetime, window: timedelta
    ) -> RateLimitWindow:
        attempts, window_start = await self._increment(
            keys=[self._key(action, identifier)],
            args=[repr(_to_timestamp(now)), math.ceil(window.total_seconds())],
        )
        return RateLimitWindow(
            attempts=int(attempts), window_start=_from_timestamp(window_start)
        )

    async def release(self, action: str, identifier: str) -> None:
        await self._release(keys=[self._key(action, identifier)])

    async def reset(self, action: str, identifier: str) -> None:
        await self.client.delete(self._key(action, identifier))

    async def purge_stale(self, before: datetime) -> int:
        # Keys carry a TTL equal to the remaining window; Redis expires them itself
        return 0
