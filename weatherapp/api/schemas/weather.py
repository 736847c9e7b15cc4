"""
Current-conditions DTOs for GET /api/v1/weather/current.

The raw ``/weather`` endpoint returns the provider payload untouched; these
models describe the normalised view the front page renders. Every field has
a placeholder so the page always has something to show, even when the
provider returned a partial payload or nothing at all.
"""

from __future__ import annotations

import time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from weatherapp.settings import UnitSystem

UNAVAILABLE_DESCRIPTION = "Weather data unavailable"
SERVICE_DOWN_DESCRIPTION = "Weather service temporarily unavailable"


class ConditionDTO(BaseModel):
    """One entry of the provider's ``weather`` array."""

    model_config = ConfigDict(extra="allow")

    main: str = "Clear"
    description: str = UNAVAILABLE_DESCRIPTION
    icon: str = "01d"


class MainReadingsDTO(BaseModel):
    """The provider's ``main`` block (temperatures in the requested units)."""

    model_config = ConfigDict(extra="allow")

    temp: float = 20
    feels_like: float = 20
    humidity: float = 50


class CurrentConditions(BaseModel):
    weather: list[ConditionDTO] = Field(default_factory=lambda: [ConditionDTO()])
    main: MainReadingsDTO = Field(default_factory=MainReadingsDTO)
    name: str
    dt: int = Field(default_factory=lambda: int(time.time()))

    @classmethod
    def from_payload(cls, payload: Any, default_name: str) -> CurrentConditions:
        """Build a view from a provider payload, filling gaps with placeholders."""
        data = payload if isinstance(payload, dict) else {}
        values: dict[str, Any] = {"name": data.get("name") or default_name}
        if data.get("weather"):
            values["weather"] = data["weather"]
        if data.get("main"):
            values["main"] = data["main"]
        if data.get("dt"):
            values["dt"] = data["dt"]
        return cls(**values)

    @classmethod
    def placeholder(cls, name: str) -> CurrentConditions:
        """View used when no source could produce conditions."""
        return cls(
            weather=[ConditionDTO(description=SERVICE_DOWN_DESCRIPTION)],
            name=name,
        )


class LocationDTO(BaseModel):
    city: str
    lat: float
    lon: float


class CurrentConditionsResponse(BaseModel):
    location: LocationDTO
    units: UnitSystem
    current_conditions: CurrentConditions
    available: bool = Field(
        ..., description="False when placeholders replaced a failed lookup"
    )
    detail: Optional[str] = Field(None, description="Failure summary, if any")
