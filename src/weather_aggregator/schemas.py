"""
Domain models for the weather aggregator.

Pydantic models for data from external APIs and internal processing.
These define the canonical schema - adapters normalize API responses to these.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003 - pydantic resolves annotations at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Samples in one archived day.
HOURS_PER_DAY = 24

#: Hour-to-hour deltas in one archived day, and the length of a profile.
PROFILE_LENGTH = HOURS_PER_DAY - 1

# =============================================================================
# Baseline
# =============================================================================


class YearlyArchiveRecord(BaseModel):
    """Hourly temperatures for one past calendar day plus derived statistics.

    ``hourly_delta_ratio[k]`` is ``(t[k + 1] - t[k]) / standard_deviation``.
    Entries are ``None`` when the standard deviation is zero.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    time: list[str] = Field(default_factory=list)
    temperature_2m: list[float]
    standard_deviation: float
    hourly_delta_ratio: list[float | None]


class HourlyProfile(BaseModel):
    """Typical hour-to-hour volatility for one location."""

    model_config = ConfigDict(frozen=True)

    average_standard_deviation: float
    hourly_average_delta_ratio: list[float | None]

    @field_validator("hourly_average_delta_ratio")
    @classmethod
    def _check_length(cls, value: list[float | None]) -> list[float | None]:
        if len(value) != PROFILE_LENGTH:
            msg = f"expected {PROFILE_LENGTH} hourly ratios, got {len(value)}"
            raise ValueError(msg)
        return value


# =============================================================================
# Geographic
# =============================================================================


class Location(BaseModel):
    """A catalog city with its cached baseline."""

    id: str = Field(..., description="Opaque catalog identifier")
    city: str
    city_ascii: str | None = None
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    country: str
    iso2: str | None = None
    iso3: str | None = None
    admin_name: str | None = None
    capital: str | None = None
    population: float | None = None

    hourly_profile: HourlyProfile | None = None
    historical_data: list[YearlyArchiveRecord] = Field(default_factory=list)


# =============================================================================
# Live observations
# =============================================================================


class Observation(BaseModel):
    """One provider's current conditions, normalized across sources."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float | None = None
    temp: float
    city_name: str | None = None
    source: str = Field(..., description="Provider identifier")
    source_response: Any = Field(default=None, description="Raw provider payload")
    predicted_next_hour: float | None = Field(default=None, alias="pred_weather_next_hr")


class AggregatedTick(BaseModel):
    """Observations collected in one polling cycle."""

    model_config = ConfigDict(frozen=True)

    sources: list[Observation] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Wire representation sent to subscribers and stored in sessions."""
        return self.model_dump(mode="json", by_alias=True)


class Session(BaseModel):
    """Append-only log of ticks for one subscriber run."""

    session_id: str
    location_id: str
    events: list[dict[str, Any]] = Field(default_factory=list)
