"""
V1 API router -- aggregates all v1 sub-routers.

Included in the app at ``/api/v1`` prefix by ``create_app()``.
"""

from __future__ import annotations

from fastapi import APIRouter

from weatherapp.api.routes.v1.health import router as health_router
from weatherapp.api.routes.v1.weather import router as weather_router

v1_router = APIRouter()

v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(weather_router, prefix="/weather", tags=["weather"])
