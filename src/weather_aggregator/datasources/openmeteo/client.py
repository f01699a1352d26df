"""Open-Meteo API client constants.

API docs:
  - Forecast: https://open-meteo.com/en/docs
  - Archive: https://open-meteo.com/en/docs/historical-weather-api
"""

OPEN_METEO_API = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_HISTORICAL = "https://archive-api.open-meteo.com/v1/archive"

SOURCE_NAME = "openmeteo"
ARCHIVE_SOURCE_NAME = "openmeteo-archive"

# Current-condition variables we request from the forecast API
CURRENT_VARS = [
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "pressure_msl",
    "wind_speed_10m",
]

# Hourly variable the baseline is built from
ARCHIVE_HOURLY_VAR = "temperature_2m"

# Archive days are requested in GMT so every year covers the same 24 UTC hours
ARCHIVE_TIMEZONE = "GMT"
