"""Current conditions from the OpenWeatherMap current weather endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from weather_aggregator.datasources.base import (
    get_json,
    optional_float,
    required_float,
    section,
)
from weather_aggregator.datasources.openweathermap.client import (
    OPENWEATHERMAP_API,
    SOURCE_NAME,
    UNITS,
)
from weather_aggregator.errors import ProviderUnavailable
from weather_aggregator.schemas import Observation

if TYPE_CHECKING:
    from weather_aggregator.schemas import Location


class OpenWeatherMapProvider:
    """Keyed provider; every field of the ``main`` block maps one to one."""

    name = SOURCE_NAME

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = OPENWEATHERMAP_API,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self, location: Location) -> Observation:
        if not self.api_key:
            raise ProviderUnavailable(self.name, "no API key configured")

        params = {
            "lat": location.lat,
            "lon": location.lng,
            "appid": self.api_key,
            "units": UNITS,
        }
        data = get_json(self.base_url, params, source=self.name, timeout=self.timeout)
        return parse_current(data)


def parse_current(data: dict[str, Any]) -> Observation:
    """Normalize an OpenWeatherMap ``/weather`` response."""
    main = section(data, "main", source=SOURCE_NAME)
    name = data.get("name")
    return Observation(
        temp=required_float(main, "temp", source=SOURCE_NAME),
        feels_like=optional_float(main, "feels_like", source=SOURCE_NAME),
        temp_min=optional_float(main, "temp_min", source=SOURCE_NAME),
        temp_max=optional_float(main, "temp_max", source=SOURCE_NAME),
        pressure=optional_float(main, "pressure", source=SOURCE_NAME),
        humidity=optional_float(main, "humidity", source=SOURCE_NAME),
        city_name=name if isinstance(name, str) else None,
        source=SOURCE_NAME,
        source_response=data,
    )
