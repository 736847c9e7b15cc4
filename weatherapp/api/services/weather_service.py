"""
Cache-aside weather lookups.

``WeatherService.fetch_weather`` is the single entry point the API layer
uses. Order of operations:

    Redis hit          -> return (Redis TTL is authoritative, no age check)
    Redis miss         -> upstream -> store in Redis (PX 600000) -> return
    Redis unavailable  -> fresh local entry -> return
                          otherwise upstream -> store locally -> return

Each call makes at most one Redis lookup and at most one upstream request,
and writes to exactly one cache on success. Concurrent misses for the same
key may both reach upstream; that's accepted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from weatherapp.api.services.cache_service import (
    PRIMARY_TTL_MS,
    CacheHit,
    CacheMiss,
    CacheUnavailable,
    LocalFallbackCache,
    PrimaryWeatherCache,
    cache_key_for_conditions,
)
from weatherapp.openweather.client import OpenWeatherClient, WeatherPayload
from weatherapp.settings import UnitSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


class WeatherService:
    """Cache-aside orchestrator in front of the OpenWeather client.

    Args:
        primary: Redis-backed primary cache.
        fallback: Process-local cache consulted only when Redis fails.
        client: Upstream weather API client.
    """

    def __init__(
        self,
        primary: PrimaryWeatherCache,
        fallback: LocalFallbackCache,
        client: OpenWeatherClient,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.client = client

    async def fetch_weather(
        self, coordinates: Coordinates, units: UnitSystem
    ) -> WeatherPayload:
        """Return current conditions for *coordinates*.

        Raises:
            UpstreamError: The provider failed and no cache could serve
                the request.
        """
        key = cache_key_for_conditions(coordinates.lat, coordinates.lon, units)
        result = await self.primary.lookup(key)

        if isinstance(result, CacheHit):
            logger.info(
                "Cache HIT (redis): %s",
                key,
                extra={"cache_key": key, "cache_tier": "redis"},
            )
            return result.payload

        if isinstance(result, CacheMiss):
            logger.info(
                "Cache MISS, fetching from API: %s",
                key,
                extra={"cache_key": key, "cache_tier": "redis"},
            )
            payload = await self.client.fetch_current_conditions(
                coordinates.lat, coordinates.lon, units
            )
            if await self.primary.store(key, payload, ttl_ms=PRIMARY_TTL_MS):
                logger.debug("Cached in Redis: %s", key)
            else:
                # Redis went away between GET and SET; keep the response
                # locally rather than calling upstream again.
                self.fallback.set(key, payload)
            return payload

        return await self._fetch_with_fallback(key, coordinates, units, result)

    async def _fetch_with_fallback(
        self,
        key: str,
        coordinates: Coordinates,
        units: UnitSystem,
        unavailable: CacheUnavailable,
    ) -> WeatherPayload:
        logger.warning(
            "Redis unavailable (%s), using in-memory cache: %s",
            unavailable.reason,
            key,
            extra={"cache_key": key, "cache_tier": "memory"},
        )
        entry = self.fallback.get(key)
        if entry is not None and self.fallback.is_fresh(entry):
            logger.info(
                "Cache HIT (memory): %s",
                key,
                extra={"cache_key": key, "cache_tier": "memory"},
            )
            return entry.payload

        logger.info(
            "Cache MISS (memory), fetching from API: %s",
            key,
            extra={"cache_key": key, "cache_tier": "memory"},
        )
        payload = await self.client.fetch_current_conditions(
            coordinates.lat, coordinates.lon, units
        )
        self.fallback.set(key, payload)
        return payload
