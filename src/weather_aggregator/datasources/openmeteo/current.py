"""Current conditions from the Open-Meteo forecast API (no API key)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from weather_aggregator.datasources.base import (
    get_json,
    optional_float,
    required_float,
    section,
)
from weather_aggregator.datasources.openmeteo.client import (
    CURRENT_VARS,
    OPEN_METEO_API,
    SOURCE_NAME,
)
from weather_aggregator.schemas import Observation

if TYPE_CHECKING:
    from weather_aggregator.schemas import Location


class OpenMeteoProvider:
    """Keyless provider.

    Open-Meteo reports a single current temperature, so it also fills the
    min/max slots of the universal observation.
    """

    name = SOURCE_NAME

    def __init__(self, *, base_url: str = OPEN_METEO_API, timeout: float | None = None) -> None:
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, location: Location) -> Observation:
        params: dict[str, Any] = {
            "latitude": location.lat,
            "longitude": location.lng,
            "current": ",".join(CURRENT_VARS),
        }
        data = get_json(self.base_url, params, source=self.name, timeout=self.timeout)
        return parse_current(data, city_name=location.city)


def parse_current(data: dict[str, Any], city_name: str | None = None) -> Observation:
    """Normalize an Open-Meteo ``current`` block."""
    current = section(data, "current", source=SOURCE_NAME)
    temp = required_float(current, "temperature_2m", source=SOURCE_NAME)
    feels_like = optional_float(current, "apparent_temperature", source=SOURCE_NAME)
    return Observation(
        temp=temp,
        feels_like=temp if feels_like is None else feels_like,
        temp_min=temp,
        temp_max=temp,
        pressure=optional_float(current, "pressure_msl", source=SOURCE_NAME),
        humidity=optional_float(current, "relative_humidity_2m", source=SOURCE_NAME),
        city_name=city_name,
        source=SOURCE_NAME,
        source_response=data,
    )
