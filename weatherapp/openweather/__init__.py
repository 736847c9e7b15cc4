"""OpenWeather API client."""

from weatherapp.openweather.client import (
    OpenWeatherClient,
    UpstreamError,
    WeatherPayload,
    format_coordinate,
)

__all__ = ["OpenWeatherClient", "UpstreamError", "WeatherPayload", "format_coordinate"]
