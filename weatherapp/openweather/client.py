"""
Async OpenWeather current-conditions client.

One GET per call against the 2.5 ``/weather`` endpoint. No retries and no
caching here -- the cache-aside layer in
``weatherapp.api.services.weather_service`` decides when this is called.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

import aiohttp

from weatherapp.settings import UnitSystem

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_TIMEOUT: float = 10.0  # seconds

WeatherPayload = dict[str, Any]


def format_coordinate(value: float) -> str:
    """Render a coordinate as a plain decimal string, never in exponent form.

    Integral values drop the ``.0`` (``45.0`` -> ``"45"``) and small values
    stay positional (``0.00005`` -> ``"0.00005"``).
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


class UpstreamError(Exception):
    """The weather provider could not produce a response.

    ``status`` is the HTTP status code for non-2xx responses and ``None``
    for transport failures (DNS, refused connection, timeout).
    """

    def __init__(self, status: int | None, reason: str = "") -> None:
        self.status = status
        self.reason = reason
        if status is None:
            message = f"Weather API unreachable: {reason}"
        else:
            message = f"Weather API error: {status} {reason}".rstrip()
        super().__init__(message)


class OpenWeatherClient:
    """Thin async wrapper around the OpenWeather current-conditions API.

    Args:
        api_key: OpenWeather ``appid`` credential.
        base_url: Endpoint URL. Overridable for tests and proxies.
        timeout: Total request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    async def fetch_current_conditions(
        self, lat: float, lon: float, units: UnitSystem
    ) -> WeatherPayload:
        """Fetch current conditions for a coordinate pair.

        Raises:
            UpstreamError: On non-2xx status, a body that is not JSON,
                transport failure or timeout.
        """
        params = {
            "lat": format_coordinate(lat),
            "lon": format_coordinate(lon),
            "units": units,
            "appid": self.api_key,
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    self.base_url,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    if not 200 <= resp.status < 300:
                        logger.warning(
                            "OpenWeather returned HTTP %d for lat=%s lon=%s",
                            resp.status,
                            lat,
                            lon,
                            extra={"upstream_status": resp.status},
                        )
                        raise UpstreamError(resp.status, resp.reason or "")
                    try:
                        return await resp.json()
                    except ValueError as exc:
                        logger.warning("OpenWeather returned a non-JSON body: %s", exc)
                        raise UpstreamError(resp.status, "invalid JSON body") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("OpenWeather request failed: %r", exc)
            raise UpstreamError(None, str(exc) or type(exc).__name__) from exc
