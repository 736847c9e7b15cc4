"""
Health endpoint.

Subsystems:
    1. redis        -- PING on the primary cache
    2. openweather  -- API key configured

Each check is wrapped in try/except -- the endpoint never returns 500.
Neither subsystem being down stops the service from answering (the
fallback cache covers Redis, cached entries cover the provider), so the
aggregate is "degraded" rather than "unhealthy".
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends

from weatherapp.api.deps import get_current_settings, get_fallback_cache, get_redis
from weatherapp.api.schemas.health import HealthResponse, SubsystemStatus
from weatherapp.api.services.cache_service import LocalFallbackCache
from weatherapp.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


async def _check_redis(client: aioredis.Redis) -> SubsystemStatus:
    now = datetime.now(timezone.utc)
    try:
        if await client.ping():
            return SubsystemStatus(
                name="redis", healthy=True, detail="Redis PONG", checked_at=now
            )
        return SubsystemStatus(
            name="redis", healthy=False, detail="PING returned False", checked_at=now
        )
    except Exception as exc:
        logger.warning("Health check: redis unhealthy: %s", exc)
        return SubsystemStatus(
            name="redis", healthy=False, detail=str(exc)[:200], checked_at=now
        )


def _check_openweather(settings: Settings) -> SubsystemStatus:
    now = datetime.now(timezone.utc)
    if settings.has_weather_api_key:
        return SubsystemStatus(
            name="openweather", healthy=True, detail="API key configured", checked_at=now
        )
    return SubsystemStatus(
        name="openweather",
        healthy=False,
        detail="WEATHER_API_KEY is not set",
        checked_at=now,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Dependency health",
)
async def health_check(
    settings: Settings = Depends(get_current_settings),
    redis_client: aioredis.Redis = Depends(get_redis),
    fallback: LocalFallbackCache = Depends(get_fallback_cache),
) -> HealthResponse:
    subsystems = [
        await _check_redis(redis_client),
        _check_openweather(settings),
    ]
    status = "healthy" if all(s.healthy for s in subsystems) else "degraded"
    return HealthResponse(
        status=status,
        subsystems=subsystems,
        fallback_entries=len(fallback),
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
    )
