"""Pure baseline computation functions (no I/O).

For one archived day with hourly samples ``t[0..23]``::

    sigma      = population standard deviation of t
    ratio[k]   = (t[k + 1] - t[k]) / sigma          k = 0..22

Across years the profile averages each ``ratio[k]`` position by position and
averages ``sigma``. Index ``k`` is positional within each record, not an
absolute hour-of-day aligned across dates.
"""

from __future__ import annotations

import statistics
from typing import TYPE_CHECKING

from weather_aggregator.errors import InsufficientHistory
from weather_aggregator.schemas import PROFILE_LENGTH, HourlyProfile, YearlyArchiveRecord

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date


def compute_delta_ratios(temps: Sequence[float], stddev: float) -> list[float | None]:
    """Hour-to-hour deltas scaled by ``stddev``.

    A flat series has no spread to scale by, so every ratio is ``None``.
    """
    if stddev == 0:
        return [None] * (len(temps) - 1)
    return [(temps[k] - temps[k - 1]) / stddev for k in range(1, len(temps))]


def build_yearly_record(
    day: date,
    temps: Sequence[float],
    times: Sequence[str] = (),
) -> YearlyArchiveRecord:
    """Compute the statistics for one archived day.

    Args:
        day: Calendar date the samples belong to.
        temps: Hourly temperatures, oldest first.
        times: Matching ISO timestamps from the provider, kept for reference.
    """
    stddev = statistics.pstdev(temps)
    return YearlyArchiveRecord(
        date=day,
        time=list(times),
        temperature_2m=list(temps),
        standard_deviation=stddev,
        hourly_delta_ratio=compute_delta_ratios(temps, stddev),
    )


def fold_profile(records: Sequence[YearlyArchiveRecord]) -> HourlyProfile:
    """Average yearly records into a 23-slot hourly profile.

    ``None`` ratios are left out of the mean for their slot; a slot where every
    record is ``None`` stays ``None``.

    Raises:
        InsufficientHistory: ``records`` is empty.
    """
    if not records:
        msg = "no archived years available to build a profile"
        raise InsufficientHistory(msg)

    averages: list[float | None] = []
    for idx in range(PROFILE_LENGTH):
        values = [
            r.hourly_delta_ratio[idx]
            for r in records
            if idx < len(r.hourly_delta_ratio) and r.hourly_delta_ratio[idx] is not None
        ]
        averages.append(statistics.fmean(values) if values else None)

    return HourlyProfile(
        average_standard_deviation=statistics.fmean(r.standard_deviation for r in records),
        hourly_average_delta_ratio=averages,
    )
