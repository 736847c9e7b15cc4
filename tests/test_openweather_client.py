"""
Unit tests for the OpenWeather client.

aiohttp is mocked at the ``ClientSession`` level; no network access.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import ANY, AsyncMock, MagicMock, patch

import aiohttp
import pytest

from weatherapp.api.services.cache_service import cache_key_for_conditions
from weatherapp.openweather.client import (
    DEFAULT_BASE_URL,
    OpenWeatherClient,
    UpstreamError,
    format_coordinate,
)


def _make_response(status: int = 200, body: dict | None = None, reason: str = "OK") -> AsyncMock:
    mock_resp = AsyncMock()
    mock_resp.status = status
    mock_resp.reason = reason
    mock_resp.json = AsyncMock(return_value=body if body is not None else {})
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)
    return mock_resp


def _patch_session(mock_session: AsyncMock):
    patcher = patch("weatherapp.openweather.client.aiohttp.ClientSession")
    mock_cs = patcher.start()
    mock_cs.return_value.__aenter__ = AsyncMock(return_value=mock_session)
    mock_cs.return_value.__aexit__ = AsyncMock(return_value=False)
    return patcher


class TestFetchCurrentConditions:
    @pytest.mark.asyncio
    async def test_success_returns_json_and_sends_query(self) -> None:
        body = {"name": "Ottawa", "main": {"temp": 12.5}}
        mock_session = AsyncMock()
        mock_session.get = MagicMock(return_value=_make_response(200, body))
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(api_key="secret")
            result = await client.fetch_current_conditions(45.3211, -75.7391, "metric")
        finally:
            patcher.stop()

        assert result == body
        mock_session.get.assert_called_once_with(
            DEFAULT_BASE_URL,
            params={
                "lat": "45.3211",
                "lon": "-75.7391",
                "units": "metric",
                "appid": "secret",
            },
            timeout=ANY,
        )

    @pytest.mark.asyncio
    async def test_custom_base_url_and_timeout(self) -> None:
        mock_session = AsyncMock()
        mock_session.get = MagicMock(return_value=_make_response(200, {}))
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(
                api_key="k", base_url="http://proxy.local/weather", timeout=3.0
            )
            await client.fetch_current_conditions(0.5, 1.5, "imperial")
        finally:
            patcher.stop()

        args, kwargs = mock_session.get.call_args
        assert args == ("http://proxy.local/weather",)
        assert kwargs["timeout"].total == 3.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,reason",
        [(401, "Unauthorized"), (404, "Not Found"), (500, "Internal Server Error")],
    )
    async def test_non_2xx_raises_with_status(self, status: int, reason: str) -> None:
        mock_session = AsyncMock()
        mock_session.get = MagicMock(return_value=_make_response(status, reason=reason))
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(api_key="k")
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_current_conditions(1.0, 2.0, "standard")
        finally:
            patcher.stop()

        assert exc_info.value.status == status
        assert str(exc_info.value) == f"Weather API error: {status} {reason}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [aiohttp.ClientConnectionError("Cannot connect to host"), asyncio.TimeoutError()],
    )
    async def test_transport_failure_raises_without_status(self, error: Exception) -> None:
        mock_session = AsyncMock()
        mock_session.get = MagicMock(side_effect=error)
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(api_key="k")
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_current_conditions(1.0, 2.0, "metric")
        finally:
            patcher.stop()

        assert exc_info.value.status is None
        assert exc_info.value.__cause__ is error
        assert str(exc_info.value).startswith("Weather API unreachable")

    @pytest.mark.asyncio
    async def test_non_json_body_raises_upstream_error(self) -> None:
        mock_resp = _make_response(200)
        decode_error = json.JSONDecodeError("Expecting property name", "{not json", 1)
        mock_resp.json = AsyncMock(side_effect=decode_error)
        mock_session = AsyncMock()
        mock_session.get = MagicMock(return_value=mock_resp)
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(api_key="k")
            with pytest.raises(UpstreamError) as exc_info:
                await client.fetch_current_conditions(45.3211, -75.7391, "metric")
        finally:
            patcher.stop()

        assert exc_info.value.status == 200
        assert exc_info.value.reason == "invalid JSON body"
        assert exc_info.value.__cause__ is decode_error

    @pytest.mark.asyncio
    async def test_query_coordinates_match_cache_key_format(self) -> None:
        mock_session = AsyncMock()
        mock_session.get = MagicMock(return_value=_make_response(200, {}))
        patcher = _patch_session(mock_session)
        try:
            client = OpenWeatherClient(api_key="k")
            await client.fetch_current_conditions(45.0, 0.00005, "metric")
        finally:
            patcher.stop()

        params = mock_session.get.call_args.kwargs["params"]
        assert params["lat"] == "45"
        assert params["lon"] == "0.00005"
        key = cache_key_for_conditions(45.0, 0.00005, "metric")
        assert key == f"lat={params['lat']}&lon={params['lon']}&units=metric"


class TestFormatCoordinate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (45.3211, "45.3211"),
            (-75.7391, "-75.7391"),
            (45.0, "45"),
            (-180, "-180"),
            (0.00005, "0.00005"),
            (-0.0001, "-0.0001"),
            (1e-7, "0.0000001"),
        ],
    )
    def test_plain_decimal(self, value: float, expected: str) -> None:
        assert format_coordinate(value) == expected


class TestUpstreamError:
    def test_message_with_status(self) -> None:
        assert str(UpstreamError(503, "Service Unavailable")) == (
            "Weather API error: 503 Service Unavailable"
        )

    def test_message_without_reason(self) -> None:
        assert str(UpstreamError(502)) == "Weather API error: 502"
