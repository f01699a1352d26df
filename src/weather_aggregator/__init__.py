"""Weather Aggregator - multi-provider weather streaming with next-hour prediction.

Architecture::

    datasources/   External APIs (OpenWeatherMap, Open-Meteo forecast + archive)
    analysis/      Pure statistics (yearly records, hourly profile, prediction)
    baseline.py    Baseline builder + per-location single-flight registry
    aggregation.py Per-subscriber ticking loop (fetch -> predict -> append -> emit)
    store.py       JSON envelopes on disk (locations, catalog, session logs)
    catalog.py     City catalog import and listing
    flows/         Prefect orchestration (baseline warm-up)
    services/      Shared utilities (HTTP client with retry)

Data flow: providers → datasources → aggregation (+ analysis) → store + subscriber

Extension points (each package's docstring has a step-by-step guide):
  - New live provider: datasources/__init__.py
  - New statistic:     analysis/__init__.py
"""

__version__ = "0.1.0"

from weather_aggregator.config import Settings
from weather_aggregator.schemas import AggregatedTick, Location, Observation

__all__ = ["AggregatedTick", "Location", "Observation", "Settings", "__version__"]
