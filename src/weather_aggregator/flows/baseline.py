"""
Prefect flow that builds baselines for catalog cities in advance.

Streaming a never-seen city blocks its first subscriber while the archive is
queried year by year. Running this flow after a catalog import moves that
cost out of the subscription path.

Run locally:
    python -m weather_aggregator.flows.baseline
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from prefect import flow, task

from weather_aggregator.config import get_settings
from weather_aggregator.errors import AggregatorError
from weather_aggregator.runtime import Services


@lru_cache
def get_services() -> Services:
    """Process-wide services, built on first use."""
    return Services.from_settings(get_settings())


@task(name="build-baseline")
def build_baseline(location_id: str) -> str:
    """Ensure one city has a profile. Returns ``built``, ``cached`` or ``failed``."""
    services = get_services()
    try:
        location = services.locations.get(location_id)
        if location is None:
            print(f"Location {location_id} not found, skipping.")
            return "failed"
        if location.hourly_profile is not None:
            return "cached"
        services.baselines.ensure(location)
    except AggregatorError as exc:
        print(f"No baseline for {location_id}: {exc}")
        return "failed"
    return "built"


@flow(name="warm-baselines", log_prints=True)
def warm_baselines(country: str | None = None, limit: int | None = None) -> dict[str, Any]:
    """
    Build missing baselines for the catalog (optionally one country).

    Args:
        country: Restrict to cities of this country.
        limit: Stop after this many cities.
    """
    entries = get_services().locations.read_catalog()
    if country is not None:
        entries = [e for e in entries if e["country"] == country]
    if limit is not None:
        entries = entries[:limit]

    print(f"Warming baselines for {len(entries)} cities...")
    results = {"built": 0, "cached": 0, "failed": 0}
    for entry in entries:
        results[build_baseline(entry["id"])] += 1

    return results


if __name__ == "__main__":
    result = warm_baselines()
    print(f"Flow complete: {result}")
