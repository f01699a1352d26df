"""
Prefect flows.

Flows:
- baseline: build hourly profiles ahead of the first subscriber

Usage (local):
    python -m weather_aggregator.flows.baseline

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'warm-baselines/default'
"""
