"""Next-hour temperature estimate from the cached hourly profile.

    predicted = temp * (1 + ratio[(hour + 1) % 23])

The profile has 23 slots, so the index wraps at 23 rather than 24, which
means hour 22 reads slot 0.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from weather_aggregator.schemas import PROFILE_LENGTH

if TYPE_CHECKING:
    from collections.abc import Sequence

    from weather_aggregator.schemas import Observation


def profile_index(hour: int) -> int:
    """Profile slot used for a prediction made during ``hour``."""
    return (hour + 1) % PROFILE_LENGTH


def predict(
    observation: Observation,
    hourly_average_delta_ratio: Sequence[float | None],
    hour: int,
) -> float | None:
    """Point estimate for the next hour; ``None`` if the slot is undefined."""
    ratio = hourly_average_delta_ratio[profile_index(hour)]
    if ratio is None:
        return None
    return observation.temp * (1 + ratio)


def predict_observation(
    observation: Observation,
    hourly_average_delta_ratio: Sequence[float | None],
    hour: int,
) -> Observation:
    """Return a copy of ``observation`` with ``predicted_next_hour`` filled in."""
    predicted = predict(observation, hourly_average_delta_ratio, hour)
    return observation.model_copy(update={"predicted_next_hour": predicted})
