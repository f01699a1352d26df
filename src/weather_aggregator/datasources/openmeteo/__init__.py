"""Open-Meteo data source.

Fetches current conditions and archived hourly temperatures from Open-Meteo
(free, no API key).

Public API:
  - current: OpenMeteoProvider (live observations)
  - archive: fetch_archive_day (24 hourly samples for one past date)
  - client: API URLs, shared constants
"""

from weather_aggregator.datasources.openmeteo.archive import (
    fetch_archive_day,
    parse_archive_day,
)
from weather_aggregator.datasources.openmeteo.client import (
    OPEN_METEO_API,
    OPEN_METEO_HISTORICAL,
)
from weather_aggregator.datasources.openmeteo.current import OpenMeteoProvider, parse_current

__all__ = [
    "OPEN_METEO_API",
    "OPEN_METEO_HISTORICAL",
    "OpenMeteoProvider",
    "fetch_archive_day",
    "parse_archive_day",
    "parse_current",
]
