"""Shared fixtures: a sample city, in-memory providers, recording subscribers."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any

import pytest

from weather_aggregator.analysis.baseline import build_yearly_record, fold_profile
from weather_aggregator.errors import DeliveryFailure, ProviderUnavailable
from weather_aggregator.schemas import HourlyProfile, Location, Observation
from weather_aggregator.store import DataStore, LocationStore, SessionStore

if TYPE_CHECKING:
    from pathlib import Path

RISING_SERIES = [float(10 + h) for h in range(24)]


class StaticProvider:
    """Returns the same observation on every fetch."""

    def __init__(self, name: str, temp: float = 20.0) -> None:
        self.name = name
        self.temp = temp
        self.calls = 0

    def fetch(self, location: Location) -> Observation:
        self.calls += 1
        return Observation(temp=self.temp, source=self.name, city_name=location.city)


class FailingProvider:
    """Always unavailable."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.calls = 0

    def fetch(self, location: Location) -> Observation:
        self.calls += 1
        raise ProviderUnavailable(self.name, "HTTP 503")


class RecordingSubscriber:
    """Keeps every payload it receives."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []

    def send(self, payload: dict[str, Any]) -> None:
        self.payloads.append(payload)


class ClosedSubscriber:
    """A subscriber whose channel is already gone."""

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, payload: dict[str, Any]) -> None:
        self.attempts += 1
        raise DeliveryFailure("connection closed")


@pytest.fixture
def location() -> Location:
    return Location(id="1276451290", city="Berlin", lat=52.52, lng=13.405, country="Germany")


@pytest.fixture
def profile() -> HourlyProfile:
    record = build_yearly_record(date(2023, 6, 1), RISING_SERIES)
    return fold_profile([record, record])


@pytest.fixture
def data_store(tmp_path: Path) -> DataStore:
    return DataStore(tmp_path)


@pytest.fixture
def locations(data_store: DataStore) -> LocationStore:
    return LocationStore(data_store)


@pytest.fixture
def sessions(data_store: DataStore) -> SessionStore:
    return SessionStore(data_store)
