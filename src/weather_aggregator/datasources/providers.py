"""Assemble the configured set of live providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from weather_aggregator.datasources.openmeteo import OpenMeteoProvider
from weather_aggregator.datasources.openweathermap import OpenWeatherMapProvider

if TYPE_CHECKING:
    from weather_aggregator.config import Settings
    from weather_aggregator.datasources.base import Provider


def default_providers(settings: Settings) -> list[Provider]:
    """One instance of every live provider, configured from ``settings``."""
    return [
        OpenWeatherMapProvider(
            settings.openweathermap_api_key,
            timeout=settings.request_timeout,
        ),
        OpenMeteoProvider(timeout=settings.request_timeout),
    ]
