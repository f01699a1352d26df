"""Tests for the provider adapters and the archive client (HTTP is mocked)."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock, patch

import pytest
import requests

from weather_aggregator.config import Settings
from weather_aggregator.datasources.openmeteo import (
    OPEN_METEO_API,
    OPEN_METEO_HISTORICAL,
    OpenMeteoProvider,
    fetch_archive_day,
)
from weather_aggregator.datasources.openweathermap import (
    OPENWEATHERMAP_API,
    OpenWeatherMapProvider,
)
from weather_aggregator.datasources.providers import default_providers
from weather_aggregator.errors import MalformedResponse, ProviderUnavailable

if TYPE_CHECKING:
    from weather_aggregator.schemas import Location

SESSION_GET = "weather_aggregator.datasources.base.session.get"

OWM_PAYLOAD: dict[str, Any] = {
    "coord": {"lon": 13.41, "lat": 52.52},
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
    "main": {
        "temp": 18.4,
        "feels_like": 17.9,
        "temp_min": 16.8,
        "temp_max": 19.6,
        "pressure": 1016,
        "humidity": 61,
    },
    "wind": {"speed": 3.6, "deg": 250},
    "name": "Berlin",
    "cod": 200,
}

OPEN_METEO_PAYLOAD: dict[str, Any] = {
    "latitude": 52.52,
    "longitude": 13.419998,
    "current": {
        "time": "2024-11-23T18:15",
        "interval": 900,
        "temperature_2m": 2.3,
        "apparent_temperature": -1.4,
        "relative_humidity_2m": 81,
        "pressure_msl": 1009.6,
        "wind_speed_10m": 10.7,
    },
}


def json_response(payload: Any, status: int = 200) -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        resp.raise_for_status = Mock()
    return resp


def archive_payload(temps: list[Any]) -> dict[str, Any]:
    return {
        "latitude": 52.5,
        "longitude": 13.4,
        "timezone": "GMT",
        "hourly": {
            "time": [f"2023-06-01T{h:02d}:00" for h in range(len(temps))],
            "temperature_2m": temps,
        },
    }


class TestOpenWeatherMap:
    """OpenWeatherMap current weather adapter."""

    @patch(SESSION_GET)
    def test_maps_main_block(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response(OWM_PAYLOAD)

        obs = OpenWeatherMapProvider("secret").fetch(location)

        assert obs.temp == 18.4
        assert obs.feels_like == 17.9
        assert obs.temp_min == 16.8
        assert obs.temp_max == 19.6
        assert obs.pressure == 1016
        assert obs.humidity == 61
        assert obs.city_name == "Berlin"
        assert obs.source == "openweathermap"
        assert obs.predicted_next_hour is None

    @patch(SESSION_GET)
    def test_keeps_raw_payload(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response(OWM_PAYLOAD)
        obs = OpenWeatherMapProvider("secret").fetch(location)
        assert obs.source_response["wind"] == {"speed": 3.6, "deg": 250}

    @patch(SESSION_GET)
    def test_request_params(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response(OWM_PAYLOAD)

        OpenWeatherMapProvider("secret", timeout=3).fetch(location)

        args, kwargs = mock_get.call_args
        assert args[0] == OPENWEATHERMAP_API
        params = args[1] if len(args) > 1 else kwargs["params"]
        assert params == {"lat": 52.52, "lon": 13.405, "appid": "secret", "units": "metric"}
        assert kwargs["timeout"] == 3

    @patch(SESSION_GET)
    def test_missing_key_skips_request(self, mock_get: Mock, location: Location) -> None:
        with pytest.raises(ProviderUnavailable):
            OpenWeatherMapProvider(None).fetch(location)
        mock_get.assert_not_called()

    @patch(SESSION_GET)
    def test_http_error(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({"cod": 401}, status=401)
        with pytest.raises(ProviderUnavailable):
            OpenWeatherMapProvider("bad").fetch(location)

    @patch(SESSION_GET)
    def test_connection_error(self, mock_get: Mock, location: Location) -> None:
        mock_get.side_effect = requests.ConnectionError("reset by peer")
        with pytest.raises(ProviderUnavailable):
            OpenWeatherMapProvider("secret").fetch(location)

    @patch(SESSION_GET)
    def test_timeout(self, mock_get: Mock, location: Location) -> None:
        mock_get.side_effect = requests.Timeout("read timed out")
        with pytest.raises(ProviderUnavailable):
            OpenWeatherMapProvider("secret").fetch(location)

    @patch(SESSION_GET)
    def test_invalid_json(self, mock_get: Mock, location: Location) -> None:
        resp = json_response(None)
        resp.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = resp
        with pytest.raises(MalformedResponse):
            OpenWeatherMapProvider("secret").fetch(location)

    @patch(SESSION_GET)
    def test_missing_main_block(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({"name": "Berlin"})
        with pytest.raises(MalformedResponse):
            OpenWeatherMapProvider("secret").fetch(location)

    @patch(SESSION_GET)
    def test_non_numeric_temp(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({"main": {"temp": "warm"}})
        with pytest.raises(MalformedResponse):
            OpenWeatherMapProvider("secret").fetch(location)


class TestOpenMeteo:
    """Open-Meteo current conditions adapter."""

    @patch(SESSION_GET)
    def test_maps_current_block(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response(OPEN_METEO_PAYLOAD)

        obs = OpenMeteoProvider().fetch(location)

        assert obs.temp == 2.3
        assert obs.temp_min == 2.3
        assert obs.temp_max == 2.3
        assert obs.feels_like == -1.4
        assert obs.pressure == 1009.6
        assert obs.humidity == 81
        assert obs.city_name == "Berlin"
        assert obs.source == "openmeteo"
        assert obs.source_response == OPEN_METEO_PAYLOAD

    @patch(SESSION_GET)
    def test_feels_like_falls_back_to_temp(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({"current": {"temperature_2m": 5.0}})
        obs = OpenMeteoProvider().fetch(location)
        assert obs.feels_like == 5.0
        assert obs.pressure is None

    @patch(SESSION_GET)
    def test_request_params(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response(OPEN_METEO_PAYLOAD)

        OpenMeteoProvider().fetch(location)

        args, kwargs = mock_get.call_args
        assert args[0] == OPEN_METEO_API
        params = args[1] if len(args) > 1 else kwargs["params"]
        assert params["latitude"] == 52.52
        assert params["longitude"] == 13.405
        assert "temperature_2m" in params["current"]

    @patch(SESSION_GET)
    def test_missing_current(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({"latitude": 52.52})
        with pytest.raises(MalformedResponse):
            OpenMeteoProvider().fetch(location)

    @patch(SESSION_GET)
    def test_server_error(self, mock_get: Mock, location: Location) -> None:
        mock_get.return_value = json_response({}, status=503)
        with pytest.raises(ProviderUnavailable):
            OpenMeteoProvider().fetch(location)


class TestArchiveDay:
    """Open-Meteo archive client."""

    @patch(SESSION_GET)
    def test_returns_24_samples(self, mock_get: Mock) -> None:
        temps = [float(10 + h) for h in range(24)]
        mock_get.return_value = json_response(archive_payload(temps))

        times, result = fetch_archive_day(date(2023, 6, 1), 52.52, 13.405)

        assert result == temps
        assert len(times) == 24
        args, kwargs = mock_get.call_args
        assert args[0] == OPEN_METEO_HISTORICAL
        params = args[1] if len(args) > 1 else kwargs["params"]
        assert params["start_date"] == "2023-06-01"
        assert params["end_date"] == "2023-06-01"
        assert params["hourly"] == "temperature_2m"

    @patch(SESSION_GET)
    def test_short_series(self, mock_get: Mock) -> None:
        mock_get.return_value = json_response(archive_payload([1.0] * 23))
        with pytest.raises(MalformedResponse):
            fetch_archive_day(date(2023, 6, 1), 52.52, 13.405)

    @patch(SESSION_GET)
    def test_gap_in_series(self, mock_get: Mock) -> None:
        temps: list[Any] = [1.0] * 24
        temps[5] = None
        mock_get.return_value = json_response(archive_payload(temps))
        with pytest.raises(MalformedResponse):
            fetch_archive_day(date(2023, 6, 1), 52.52, 13.405)

    @patch(SESSION_GET)
    def test_unavailable(self, mock_get: Mock) -> None:
        mock_get.return_value = json_response({"error": True}, status=400)
        with pytest.raises(ProviderUnavailable):
            fetch_archive_day(date(2023, 6, 1), 52.52, 13.405)


class TestDefaultProviders:
    """Provider wiring from settings."""

    def test_one_of_each(self) -> None:
        settings = Settings(openweathermap_api_key="k", request_timeout=4)
        providers = default_providers(settings)
        assert sorted(p.name for p in providers) == ["openmeteo", "openweathermap"]

    def test_key_and_timeout_passed(self) -> None:
        settings = Settings(openweathermap_api_key="k", request_timeout=4)
        owm = next(p for p in default_providers(settings) if p.name == "openweathermap")
        assert isinstance(owm, OpenWeatherMapProvider)
        assert owm.api_key == "k"
        assert owm.timeout == 4
