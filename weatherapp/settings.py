"""
Centralized application settings via pydantic-settings.

All configuration is loaded from environment variables with sensible
development defaults. Production deployments override via .env file
or container environment.
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

UnitSystem = Literal["standard", "metric", "imperial"]


class Settings(BaseSettings):
    """Application configuration with env-var binding."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- OpenWeather --
    weather_api_key: str = ""
    weather_base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    weather_request_timeout: float = 10.0  # seconds

    # -- Redis --
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 2.0  # seconds

    # -- Displayed location (Algonquin College, Woodroffe Campus) --
    location_city: str = "Ottawa"
    location_lat: float = 45.3211
    location_lon: float = -75.7391
    location_units: UnitSystem = "metric"

    # -- Runtime --
    environment: Literal["development", "production", "testing"] = "development"

    # -- API --
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # -- Logging --
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def has_weather_api_key(self) -> bool:
        return bool(self.weather_api_key)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return a cached singleton Settings instance."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = Settings()
    return _settings
