"""
Two caches for upstream weather responses.

Primary: Redis, shared by every worker and container. Entries expire via
the Redis ``PX`` TTL; the application never inspects their age.

Fallback: a plain in-process dict used only while Redis is unreachable.
Entries carry their fetch time and are checked against a 10 minute
staleness window on read. There is no eviction -- the process is expected
to be short-lived (container redeploys), so the map stays small.

The two caches never share entries. The primary lookup reports its outcome
as a ``CacheResult`` value (hit / miss / unavailable) instead of raising,
so the orchestrator can branch on it explicitly.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from weatherapp.openweather.client import format_coordinate
from weatherapp.settings import UnitSystem

logger = logging.getLogger(__name__)

STALENESS_THRESHOLD_S: int = 600  # 10 minutes
PRIMARY_TTL_MS: int = STALENESS_THRESHOLD_S * 1000

# Failures that mean "Redis is not usable right now".
_REDIS_ERRORS: tuple[type[BaseException], ...] = (
    RedisError,
    OSError,
    asyncio.TimeoutError,
)


# -----------------------------------------------------------------------
# Cache key and staleness policy
# -----------------------------------------------------------------------


def cache_key_for_conditions(lat: float, lon: float, units: UnitSystem) -> str:
    """Generate the cache key for a current-conditions lookup.

    Returns:
        ``"lat={lat}&lon={lon}&units={units}"``
    """
    return f"lat={format_coordinate(lat)}&lon={format_coordinate(lon)}&units={units}"


def is_stale(last_fetch: float, now: float | None = None) -> bool:
    """True if *last_fetch* is more than 10 minutes before *now*."""
    if now is None:
        now = time.time()
    return now - last_fetch > STALENESS_THRESHOLD_S


# -----------------------------------------------------------------------
# Primary cache lookup outcomes
# -----------------------------------------------------------------------


@dataclass(frozen=True)
class CacheHit:
    payload: Any


@dataclass(frozen=True)
class CacheMiss:
    pass


@dataclass(frozen=True)
class CacheUnavailable:
    reason: str


CacheResult = Union[CacheHit, CacheMiss, CacheUnavailable]


@dataclass(frozen=True)
class CacheEntry:
    """A fallback-cache entry. Replaced whole on every write."""

    last_fetch: float
    payload: Any


# -----------------------------------------------------------------------
# Caches
# -----------------------------------------------------------------------


class PrimaryWeatherCache:
    """Redis-backed primary cache.

    ``lookup()`` and ``store()`` use ``cache_key`` as-is; key construction
    lives in ``cache_key_for_conditions``.

    Args:
        redis_client: A ``redis.asyncio.Redis`` instance created with
            ``decode_responses=True``.
    """

    def __init__(self, redis_client: aioredis.Redis) -> None:
        self._redis = redis_client

    async def lookup(self, cache_key: str) -> CacheResult:
        """Read *cache_key* from Redis.

        Returns:
            ``CacheHit`` with the decoded payload, ``CacheMiss`` if the key
            is absent, or ``CacheUnavailable`` if Redis failed or held an
            undecodable value.
        """
        try:
            raw = await self._redis.get(cache_key)
        except _REDIS_ERRORS as exc:
            logger.warning(
                "Redis GET failed for key %s: %s",
                cache_key,
                exc,
                extra={"cache_key": cache_key, "cache_tier": "redis"},
            )
            return CacheUnavailable(reason=f"{type(exc).__name__}: {exc}")

        if raw is None:
            return CacheMiss()

        try:
            return CacheHit(payload=json.loads(raw))
        except ValueError as exc:
            logger.warning("Undecodable Redis value for key %s: %s", cache_key, exc)
            return CacheUnavailable(reason=f"corrupt entry: {exc}")

    async def store(
        self, cache_key: str, payload: Any, ttl_ms: int = PRIMARY_TTL_MS
    ) -> bool:
        """Write *payload* under *cache_key* with a millisecond TTL.

        Returns:
            True if Redis accepted the write, False if it failed.
        """
        try:
            await self._redis.set(cache_key, json.dumps(payload), px=ttl_ms)
        except _REDIS_ERRORS as exc:
            logger.warning(
                "Redis SET failed for key %s: %s",
                cache_key,
                exc,
                extra={"cache_key": cache_key, "cache_tier": "redis"},
            )
            return False
        return True


class LocalFallbackCache:
    """Process-local key -> ``CacheEntry`` map used while Redis is down.

    Args:
        clock: Wall-clock source in epoch seconds. Injected in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    def get(self, cache_key: str) -> CacheEntry | None:
        return self._entries.get(cache_key)

    def set(self, cache_key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(last_fetch=self._clock(), payload=payload)
        self._entries[cache_key] = entry
        return entry

    def is_fresh(self, entry: CacheEntry) -> bool:
        return not is_stale(entry.last_fetch, now=self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, cache_key: object) -> bool:
        return cache_key in self._entries
