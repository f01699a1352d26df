"""OpenWeatherMap live data source (requires an API key).

Public API:
  - current: OpenWeatherMapProvider, parse_current
  - client: API URL, source identifier
"""

from weather_aggregator.datasources.openweathermap.client import (
    OPENWEATHERMAP_API,
    SOURCE_NAME,
)
from weather_aggregator.datasources.openweathermap.current import (
    OpenWeatherMapProvider,
    parse_current,
)

__all__ = [
    "OPENWEATHERMAP_API",
    "SOURCE_NAME",
    "OpenWeatherMapProvider",
    "parse_current",
]
