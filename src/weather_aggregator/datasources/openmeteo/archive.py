"""Hourly temperatures for a single past day from the Open-Meteo Archive API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from weather_aggregator.datasources.base import get_json, section
from weather_aggregator.datasources.openmeteo.client import (
    ARCHIVE_HOURLY_VAR,
    ARCHIVE_SOURCE_NAME,
    ARCHIVE_TIMEZONE,
    OPEN_METEO_HISTORICAL,
)
from weather_aggregator.errors import MalformedResponse
from weather_aggregator.schemas import HOURS_PER_DAY

if TYPE_CHECKING:
    from datetime import date


def fetch_archive_day(
    day: date,
    lat: float,
    lon: float,
    *,
    base_url: str = OPEN_METEO_HISTORICAL,
    timeout: float | None = None,
) -> tuple[list[str], list[float]]:
    """
    Fetch the hourly temperature series for one calendar day.

    Args:
        day: The archived date.
        lat: Latitude.
        lon: Longitude.
        base_url: Archive endpoint (overridable for tests).
        timeout: Per-request timeout; None uses the session default.

    Returns:
        ``(time, temperature_2m)``, both exactly 24 entries long.

    Raises:
        ProviderUnavailable: The archive could not be reached.
        MalformedResponse: The series is missing, short, or has gaps.
    """
    params: dict[str, Any] = {
        "latitude": lat,
        "longitude": lon,
        "start_date": day.isoformat(),
        "end_date": day.isoformat(),
        "hourly": ARCHIVE_HOURLY_VAR,
        "timezone": ARCHIVE_TIMEZONE,
    }
    data = get_json(base_url, params, source=ARCHIVE_SOURCE_NAME, timeout=timeout)
    return parse_archive_day(data)


def parse_archive_day(data: dict[str, Any]) -> tuple[list[str], list[float]]:
    """Extract and validate the 24-sample series from an archive response."""
    hourly = section(data, "hourly", source=ARCHIVE_SOURCE_NAME)
    temps = hourly.get(ARCHIVE_HOURLY_VAR)
    times = hourly.get("time") or []

    if not isinstance(temps, list) or len(temps) != HOURS_PER_DAY:
        count = len(temps) if isinstance(temps, list) else 0
        msg = f"expected {HOURS_PER_DAY} hourly samples, got {count}"
        raise MalformedResponse(ARCHIVE_SOURCE_NAME, msg)
    if any(isinstance(t, bool) or not isinstance(t, int | float) for t in temps):
        raise MalformedResponse(ARCHIVE_SOURCE_NAME, "hourly series has missing values")

    return [str(t) for t in times], [float(t) for t in temps]
