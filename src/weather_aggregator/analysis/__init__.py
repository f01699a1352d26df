"""Pure statistics over archived and live observations.

Dependency rule: analysis/ imports schemas only. It never fetches data,
touches the store, or knows about subscribers.

Modules:
  - baseline: 24 hourly samples -> yearly record -> 23-slot hourly profile
  - prediction: observation + hourly profile -> next-hour temperature

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with pure functions over ``schemas`` models.
2. No I/O, no HTTP, no Prefect decorators, no wall clock reads
   (take the hour or date as an argument).
3. Re-export in ``__init__.py`` and add tests in ``tests/test_{name}.py``.
"""

from weather_aggregator.analysis.baseline import (
    build_yearly_record,
    compute_delta_ratios,
    fold_profile,
)
from weather_aggregator.analysis.prediction import predict, predict_observation, profile_index

__all__ = [
    "build_yearly_record",
    "compute_delta_ratios",
    "fold_profile",
    "predict",
    "predict_observation",
    "profile_index",
]
