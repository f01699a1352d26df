"""
City catalog.

Imports a world-cities CSV (the simplemaps layout: ``city, city_ascii, lat,
lng, country, iso2, iso3, admin_name, capital, population, id``) into the
location store and answers the two catalog questions subscribers ask before
streaming: which countries exist, and which cities a country has.
"""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING, Any

from weather_aggregator.schemas import Location

if TYPE_CHECKING:
    from pathlib import Path

    from weather_aggregator.store import LocationStore

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = ("city_ascii", "iso2", "iso3", "admin_name", "capital")


def _row_to_location(row: dict[str, str]) -> Location:
    population = (row.get("population") or "").strip()
    fields: dict[str, Any] = {
        "id": row["id"].strip(),
        "city": row["city"].strip(),
        "lat": row["lat"],
        "lng": row["lng"],
        "country": row["country"].strip(),
        "population": population or None,
    }
    for key in _OPTIONAL_TEXT:
        value = (row.get(key) or "").strip()
        fields[key] = value or None
    return Location.model_validate(fields)


def catalog_entry(location: Location) -> dict[str, Any]:
    """Index fields kept in ``reference/catalog.json``."""
    return {
        "id": location.id,
        "city": location.city,
        "country": location.country,
        "lat": location.lat,
        "lng": location.lng,
    }


def import_cities(csv_path: Path, locations: LocationStore) -> int:
    """
    Load cities from ``csv_path`` into the store.

    Rows that fail validation are logged and skipped. Re-importing a city
    keeps the baseline already cached for it.

    Returns:
        Number of cities imported.
    """
    entries: list[dict[str, Any]] = []
    with csv_path.open(newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            try:
                location = _row_to_location(row)
                locations.path_for(location.id)
            except (KeyError, AttributeError, ValueError) as exc:
                logger.warning("Skipping %s line %d: %s", csv_path.name, line_no, exc)
                continue

            existing = locations.get(location.id)
            if existing is not None:
                location = location.model_copy(
                    update={
                        "hourly_profile": existing.hourly_profile,
                        "historical_data": existing.historical_data,
                    }
                )
            locations.save(location)
            entries.append(catalog_entry(location))

    locations.write_catalog(entries)
    logger.info("Imported %d cities from %s", len(entries), csv_path)
    return len(entries)


def list_countries(locations: LocationStore) -> list[str]:
    """Distinct country names, sorted."""
    return sorted({entry["country"] for entry in locations.read_catalog()})


def list_cities(locations: LocationStore, country: str) -> list[dict[str, Any]]:
    """Catalog entries for ``country``, sorted by city name."""
    cities = [entry for entry in locations.read_catalog() if entry["country"] == country]
    return sorted(cities, key=lambda entry: entry["city"])
