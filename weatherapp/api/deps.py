"""
FastAPI dependency injection providers.

Thin wrappers that adapt infrastructure (settings, Redis, the fallback
cache, the OpenWeather client) into ``Depends()`` callables. No business
logic here -- it's plumbing.

The Redis client is created lazily and kept even if the server is down at
startup: ``redis.asyncio`` connects per operation, so each failed GET shows
up as ``CacheUnavailable`` and routes requests through the in-memory
fallback until Redis comes back.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis

from weatherapp.api.services.cache_service import (
    LocalFallbackCache,
    PrimaryWeatherCache,
)
from weatherapp.api.services.weather_service import WeatherService
from weatherapp.openweather.client import OpenWeatherClient
from weatherapp.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Module-level singletons -- lazy-initialized on first access.
_redis_client: aioredis.Redis | None = None
_fallback_cache: LocalFallbackCache | None = None
_weather_service: WeatherService | None = None


def get_redis() -> aioredis.Redis:
    """Return the process-wide async Redis client."""
    global _redis_client  # noqa: PLW0603
    if _redis_client is None:
        settings = get_settings()
        _redis_client = aioredis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.redis_socket_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )
        logger.info("Redis client configured: %s", settings.redis_url)
    return _redis_client


def get_fallback_cache() -> LocalFallbackCache:
    """Return the process-local fallback cache (created empty on first use)."""
    global _fallback_cache  # noqa: PLW0603
    if _fallback_cache is None:
        _fallback_cache = LocalFallbackCache()
    return _fallback_cache


def get_weather_service() -> WeatherService:
    """Return the ``WeatherService`` singleton wired to the shared caches."""
    global _weather_service  # noqa: PLW0603
    if _weather_service is None:
        settings = get_settings()
        if not settings.has_weather_api_key:
            logger.warning("WEATHER_API_KEY is not set; upstream calls will fail")
        client = OpenWeatherClient(
            api_key=settings.weather_api_key,
            base_url=settings.weather_base_url,
            timeout=settings.weather_request_timeout,
        )
        _weather_service = WeatherService(
            primary=PrimaryWeatherCache(get_redis()),
            fallback=get_fallback_cache(),
            client=client,
        )
    return _weather_service


async def close_redis() -> None:
    """Close the Redis connection pool (app lifespan shutdown)."""
    global _redis_client, _weather_service  # noqa: PLW0603
    if _redis_client is not None:
        try:
            await _redis_client.aclose()
        except Exception as exc:
            logger.warning("Error closing Redis: %s", exc)
        _redis_client = None
    _weather_service = None


def get_current_settings() -> Settings:
    """Return the cached settings singleton."""
    return get_settings()
