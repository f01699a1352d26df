"""
Per-subscriber aggregation loop.

One ``AggregationLoop`` serves one subscriber for one location:

    Init      ensure the location's hourly profile (single-flight build)
    Ticking   every ``interval`` seconds: fetch all providers, predict,
              append the tick to the session log, emit it
    Terminal  persistence failure, delivery failure, or the stop event

Provider failures only shrink the tick. Baseline, persistence and delivery
failures are logged and re-raised to whoever called ``run``; nothing is
retried here.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, TextIO

from weather_aggregator.analysis.prediction import predict_observation
from weather_aggregator.errors import (
    AggregatorError,
    DeliveryFailure,
    ProviderError,
)
from weather_aggregator.schemas import AggregatedTick

if TYPE_CHECKING:
    from concurrent.futures import Future

    from weather_aggregator.baseline import BaselineRegistry
    from weather_aggregator.datasources.base import Provider
    from weather_aggregator.schemas import HourlyProfile, Location, Observation
    from weather_aggregator.store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0  # seconds


class Subscriber(Protocol):
    """Receives one structured message per tick."""

    def send(self, payload: dict[str, Any]) -> None:
        """Deliver ``payload`` or raise ``DeliveryFailure``."""
        ...


class JsonLinesSubscriber:
    """Writes each tick as one JSON document per line."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def send(self, payload: dict[str, Any]) -> None:
        try:
            self.stream.write(json.dumps(payload) + "\n")
            self.stream.flush()
        except OSError as exc:
            msg = f"could not write tick: {exc}"
            raise DeliveryFailure(msg) from exc


class AggregationLoop:
    """Stream aggregated observations for one location to one subscriber."""

    def __init__(
        self,
        location: Location,
        subscriber: Subscriber,
        *,
        providers: Sequence[Provider],
        baselines: BaselineRegistry,
        sessions: SessionStore,
        interval: float = DEFAULT_INTERVAL,
        fetch_timeout: float | None = None,
        session_id: str | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.location = location
        self.subscriber = subscriber
        self.providers = sorted(providers, key=lambda p: p.name)
        self.baselines = baselines
        self.sessions = sessions
        self.interval = interval
        self.fetch_timeout = fetch_timeout
        self.session_id = session_id or uuid.uuid4().hex
        self.clock = clock
        self.profile: HourlyProfile | None = None
        self._pool: ThreadPoolExecutor | None = None
        self._inflight: dict[str, Future[Observation]] = {}

    def start(self) -> HourlyProfile:
        """Init state: load or build the location's hourly profile."""
        if self.profile is None:
            self.profile = self.baselines.ensure(self.location)
        return self.profile

    def collect(self) -> list[Observation]:
        """Fetch every provider concurrently; failed providers are left out.

        All fetches share one ``fetch_timeout``. A provider whose previous
        fetch is still running is skipped until that fetch returns. Results
        keep provider-name order regardless of completion order.
        """
        if not self.providers:
            return []

        pool = self._pool or ThreadPoolExecutor(max_workers=len(self.providers))
        try:
            submitted: list[tuple[Provider, Future[Observation]]] = []
            for provider in self.providers:
                pending = self._inflight.get(provider.name)
                if pending is not None and not pending.done():
                    logger.warning(
                        "Provider %s still busy with an earlier fetch for %s, skipping",
                        provider.name,
                        self.location.id,
                    )
                    continue
                future = pool.submit(provider.fetch, self.location)
                self._inflight[provider.name] = future
                submitted.append((provider, future))

            wait([future for _, future in submitted], timeout=self.fetch_timeout)

            observations: list[Observation] = []
            for provider, future in submitted:
                observation = self._result(provider, future)
                if observation is not None:
                    observations.append(observation)
            return observations
        finally:
            if pool is not self._pool:
                pool.shutdown(wait=False, cancel_futures=True)

    def _result(self, provider: Provider, future: Future[Observation]) -> Observation | None:
        if not future.done():
            logger.warning(
                "Provider %s timed out after %ss for %s",
                provider.name,
                self.fetch_timeout,
                self.location.id,
            )
            return None

        del self._inflight[provider.name]
        try:
            return future.result()
        except ProviderError as exc:
            logger.warning("Provider %s failed for %s: %s", provider.name, self.location.id, exc)
        except Exception:  # noqa: BLE001 - provider failures never end the loop
            logger.exception("Provider %s raised unexpectedly for %s", provider.name, self.location.id)
        return None

    def tick(self) -> AggregatedTick:
        """Run one cycle: collect, predict, append, emit."""
        profile = self.start()
        hour = self.clock().hour
        observations = [
            predict_observation(obs, profile.hourly_average_delta_ratio, hour)
            for obs in self.collect()
        ]
        tick = AggregatedTick(sources=observations)

        count = self.sessions.append(self.session_id, self.location.id, tick)
        self._emit(tick)
        logger.debug(
            "Session %s tick %d: %d/%d providers",
            self.session_id,
            count,
            len(observations),
            len(self.providers),
        )
        return tick

    def _emit(self, tick: AggregatedTick) -> None:
        try:
            self.subscriber.send(tick.to_payload())
        except OSError as exc:
            msg = f"subscriber channel closed: {exc}"
            raise DeliveryFailure(msg) from exc

    def run(self, stop: threading.Event | None = None, max_ticks: int | None = None) -> int:
        """
        Run until cancelled or a fatal error.

        Args:
            stop: Set it to end the loop; the current tick finishes first.
            max_ticks: End after this many ticks (None runs until cancelled).

        Returns:
            Number of ticks emitted.

        Raises:
            InsufficientHistory: No baseline could be built.
            PersistenceFailure: The session log or location could not be written.
            DeliveryFailure: The subscriber rejected a tick.
        """
        stop = stop or threading.Event()
        ticks = 0
        logger.info(
            "Session %s started for %s (%s)",
            self.session_id,
            self.location.city,
            self.location.id,
        )
        try:
            self.start()
            self._pool = ThreadPoolExecutor(
                max_workers=max(1, len(self.providers)),
                thread_name_prefix=f"fetch-{self.session_id[:8]}",
            )
            while not stop.wait(self.interval):
                self.tick()
                ticks += 1
                if max_ticks is not None and ticks >= max_ticks:
                    break
        except AggregatorError as exc:
            logger.error("Session %s terminated after %d ticks: %s", self.session_id, ticks, exc)
            raise
        finally:
            if self._pool is not None:
                self._pool.shutdown(wait=False, cancel_futures=True)
                self._pool = None

        logger.info("Session %s stopped after %d ticks", self.session_id, ticks)
        return ticks
