"""Wire stores, providers and the baseline registry from settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from weather_aggregator.aggregation import AggregationLoop
from weather_aggregator.baseline import BaselineBuilder, BaselineRegistry
from weather_aggregator.datasources.providers import default_providers
from weather_aggregator.store import DataStore, LocationStore, SessionStore

if TYPE_CHECKING:
    from weather_aggregator.aggregation import Subscriber
    from weather_aggregator.config import Settings
    from weather_aggregator.datasources.base import Provider
    from weather_aggregator.schemas import Location


@dataclass
class Services:
    """Everything shared between aggregation loops in one process."""

    settings: Settings
    locations: LocationStore
    sessions: SessionStore
    baselines: BaselineRegistry
    providers: list[Provider]

    @classmethod
    def from_settings(cls, settings: Settings) -> Services:
        store = DataStore(settings.data_dir)
        locations = LocationStore(store)
        builder = BaselineBuilder(settings.historical_depth, timeout=settings.request_timeout)
        return cls(
            settings=settings,
            locations=locations,
            sessions=SessionStore(store, max_events=settings.session_max_events),
            baselines=BaselineRegistry(builder, locations),
            providers=default_providers(settings),
        )

    def loop_for(self, location: Location, subscriber: Subscriber, **kwargs: Any) -> AggregationLoop:
        """A new loop (and session) for one subscriber."""
        kwargs.setdefault("interval", self.settings.tick_interval_seconds)
        kwargs.setdefault("fetch_timeout", self.settings.request_timeout)
        return AggregationLoop(
            location,
            subscriber,
            providers=self.providers,
            baselines=self.baselines,
            sessions=self.sessions,
            **kwargs,
        )
