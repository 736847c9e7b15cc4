"""
Weather endpoints.

Endpoints:
    GET /weather          -- Raw provider payload for any coordinates (cache-aside)
    GET /weather/current  -- Normalised conditions for the configured location,
                             with placeholders instead of errors
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from weatherapp.api.deps import get_current_settings, get_weather_service
from weatherapp.api.schemas.weather import (
    CurrentConditions,
    CurrentConditionsResponse,
    LocationDTO,
)
from weatherapp.api.services.weather_service import Coordinates, WeatherService
from weatherapp.openweather.client import UpstreamError, WeatherPayload
from weatherapp.settings import Settings, UnitSystem

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    summary="Current conditions (raw)",
    description=(
        "Returns the OpenWeather current-conditions payload for the given "
        "coordinates, served from cache when possible. 502 if the provider "
        "fails and no cached copy is available."
    ),
)
async def get_weather(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    units: UnitSystem = Query(default="metric", description="Unit system"),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherPayload:
    return await service.fetch_weather(Coordinates(lat=lat, lon=lon), units)


@router.get(
    "/current",
    response_model=CurrentConditionsResponse,
    summary="Current conditions for the configured location",
    description="Never fails on provider errors; placeholder values are returned instead.",
)
async def get_current_conditions(
    service: WeatherService = Depends(get_weather_service),
    settings: Settings = Depends(get_current_settings),
) -> CurrentConditionsResponse:
    location = LocationDTO(
        city=settings.location_city,
        lat=settings.location_lat,
        lon=settings.location_lon,
    )
    try:
        payload = await service.fetch_weather(
            Coordinates(lat=location.lat, lon=location.lon), settings.location_units
        )
        conditions = CurrentConditions.from_payload(payload, default_name=location.city)
        available, detail = True, None
    except (UpstreamError, ValidationError) as exc:
        logger.error("Current conditions unavailable, serving placeholders: %s", exc)
        conditions = CurrentConditions.placeholder(name=location.city)
        available, detail = False, str(exc)[:200]

    return CurrentConditionsResponse(
        location=location,
        units=settings.location_units,
        current_conditions=conditions,
        available=available,
        detail=detail,
    )
