"""
Historical baseline construction.

``BaselineBuilder`` fetches "this calendar day" for each of the last N years
from the Open-Meteo archive and folds the per-year statistics into an
``HourlyProfile``. ``BaselineRegistry`` makes sure concurrent subscribers to a
never-seen location share one build instead of each hitting the archive.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from datetime import date
from typing import TYPE_CHECKING

from weather_aggregator.analysis.baseline import build_yearly_record, fold_profile
from weather_aggregator.datasources.openmeteo import fetch_archive_day
from weather_aggregator.errors import InsufficientHistory, ProviderError

if TYPE_CHECKING:
    from weather_aggregator.schemas import HourlyProfile, Location, YearlyArchiveRecord
    from weather_aggregator.store import LocationStore

logger = logging.getLogger(__name__)

#: ``(day, lat, lon, timeout=...) -> (times, temps)``
ArchiveFetcher = Callable[..., tuple[list[str], list[float]]]


def years_ago(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


class BaselineBuilder:
    """Build an hourly profile from archived days."""

    def __init__(
        self,
        lookback_years: int,
        *,
        fetch_day: ArchiveFetcher = fetch_archive_day,
        today: Callable[[], date] = date.today,
        timeout: float | None = None,
    ) -> None:
        if lookback_years < 1:
            msg = f"lookback_years must be at least 1, got {lookback_years}"
            raise ValueError(msg)
        self.lookback_years = lookback_years
        self.fetch_day = fetch_day
        self.today = today
        self.timeout = timeout

    def collect(self, location: Location) -> list[YearlyArchiveRecord]:
        """Fetch and summarize each archived year; failed years are skipped."""
        current = self.today()
        records: list[YearlyArchiveRecord] = []
        for i in range(1, self.lookback_years + 1):
            day = years_ago(current, i)
            try:
                times, temps = self.fetch_day(day, location.lat, location.lng, timeout=self.timeout)
            except ProviderError as exc:
                logger.warning("Skipping %s for %s: %s", day, location.city, exc)
                continue

            record = build_yearly_record(day, temps, times)
            logger.info(
                "Standard deviation for %s on %s is %.3f",
                location.city,
                day,
                record.standard_deviation,
            )
            records.append(record)
        return records

    def build(self, location: Location) -> tuple[HourlyProfile, list[YearlyArchiveRecord]]:
        """
        Compute the hourly profile for ``location``.

        Returns:
            The profile and the yearly records it was folded from.

        Raises:
            InsufficientHistory: Not a single archived year could be fetched.
        """
        records = self.collect(location)
        if not records:
            msg = (
                f"no archived days for {location.city} ({location.id}) "
                f"in the last {self.lookback_years} years"
            )
            raise InsufficientHistory(msg)
        return fold_profile(records), records


class BaselineRegistry:
    """Single-flight access to location baselines.

    The first caller for a location without a profile runs the builder and
    writes the result to the store; callers arriving meanwhile wait for that
    result (or error). Failed builds are forgotten so a later call can retry.
    """

    def __init__(self, builder: BaselineBuilder, locations: LocationStore) -> None:
        self.builder = builder
        self.locations = locations
        self._lock = threading.Lock()
        self._inflight: dict[str, Future[HourlyProfile]] = {}

    def ensure(self, location: Location) -> HourlyProfile:
        """Return the cached profile for ``location``, building it if needed."""
        if location.hourly_profile is not None:
            return location.hourly_profile

        with self._lock:
            future = self._inflight.get(location.id)
            owner = future is None
            if future is None:
                future = Future()
                self._inflight[location.id] = future

        if not owner:
            logger.debug("Waiting for in-flight baseline of %s", location.id)
            return future.result()

        try:
            profile = self._build_and_store(location)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(profile)
            return profile
        finally:
            with self._lock:
                self._inflight.pop(location.id, None)

    def _build_and_store(self, location: Location) -> HourlyProfile:
        stored = self.locations.get(location.id)
        if stored is not None and stored.hourly_profile is not None:
            return stored.hourly_profile

        logger.info(
            "Building baseline for %s (%s) from %d years",
            location.city,
            location.id,
            self.builder.lookback_years,
        )
        profile, records = self.builder.build(location)
        self.locations.update_baseline(location.id, profile, records)
        return profile
