"""
Pydantic V2 DTO schemas for the weather API.

    from weatherapp.api.schemas import CurrentConditionsResponse, HealthResponse
"""

from weatherapp.api.schemas.common import ProblemDetail
from weatherapp.api.schemas.health import (
    HealthResponse,
    SubsystemStatus,
)
from weatherapp.api.schemas.weather import (
    ConditionDTO,
    CurrentConditions,
    CurrentConditionsResponse,
    LocationDTO,
    MainReadingsDTO,
)

__all__ = [
    # Weather
    "ConditionDTO",
    "CurrentConditions",
    "CurrentConditionsResponse",
    "LocationDTO",
    "MainReadingsDTO",
    # Health
    "HealthResponse",
    "SubsystemStatus",
    # Common
    "ProblemDetail",
]
