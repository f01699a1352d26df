"""JSON data store for locations, the city catalog, and session logs.

Layout under ``base_dir``::

    reference/catalog.json     id / city / country for every imported city
    locations/{id}.json        one Location, including its cached baseline
    sessions/{session}.json    one Session: location id + ordered tick events

Every JSON file is wrapped in a metadata envelope (``{"meta": ..., "data": ...}``)
and written with an atomic replace, so a reader never sees a half-written file.

``LocationStore`` and ``SessionStore`` translate I/O and decode problems into
``PersistenceFailure``; ``DataStore`` itself stays a thin file layer.
"""

from __future__ import annotations

import json
import re
import threading
import uuid
import weakref
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from weather_aggregator.errors import PersistenceFailure
from weather_aggregator.schemas import Location, Session

if TYPE_CHECKING:
    from weather_aggregator.schemas import AggregatedTick, HourlyProfile, YearlyArchiveRecord

CATALOG_PATH = Path("reference/catalog.json")
LOCATIONS_DIR = Path("locations")
SESSIONS_DIR = Path("sessions")

_SAFE_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


class DataStore:
    """Manages read/write of metadata-enveloped JSON files."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.reference = base_dir / "reference"
        self.locations = base_dir / LOCATIONS_DIR
        self.sessions = base_dir / SESSIONS_DIR

    def read(self, path: Path) -> Any:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(self, path: Path, data: Any, source: str, **params: Any) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``sessions/abc.json``).
            data: JSON-serializable payload stored under the ``data`` key.
            source: Producer identifier (e.g. ``"aggregation-loop"``).
            **params: Extra metadata fields.

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {
            "source": source,
            "written_at": datetime.now(UTC).isoformat(),
        }
        if params:
            meta.update(params)

        tmp = full.with_name(f".{full.name}.{uuid.uuid4().hex}.tmp")
        try:
            with tmp.open("w") as f:
                json.dump({"meta": meta, "data": data}, f, indent=2)
            tmp.replace(full)
        finally:
            tmp.unlink(missing_ok=True)

        return full

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full


class _KeyedLocks:
    """One lock per key, dropped once no caller holds a reference to it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __getitem__(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)


def _checked_id(value: str, kind: str) -> str:
    if not _SAFE_ID.fullmatch(value):
        msg = f"Invalid {kind} id: {value!r}"
        raise ValueError(msg)
    return value


class LocationStore:
    """Locations and the catalog index."""

    def __init__(self, store: DataStore) -> None:
        self.store = store
        self._locks = _KeyedLocks()

    def path_for(self, location_id: str) -> Path:
        return LOCATIONS_DIR / f"{_checked_id(location_id, 'location')}.json"

    def get(self, location_id: str) -> Location | None:
        """Load one location, or None if it was never imported."""
        try:
            payload = self.store.read(self.path_for(location_id))
            if payload is None:
                return None
            return Location.model_validate(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            msg = f"could not read location {location_id}: {exc}"
            raise PersistenceFailure(msg) from exc

    def save(self, location: Location) -> Path:
        with self._locks[location.id]:
            return self._write(location)

    def update_baseline(
        self,
        location_id: str,
        profile: HourlyProfile,
        records: list[YearlyArchiveRecord],
    ) -> Location:
        """Store a computed baseline on an existing location."""
        with self._locks[location_id]:
            location = self.get(location_id)
            if location is None:
                msg = f"location {location_id} does not exist"
                raise PersistenceFailure(msg)
            updated = location.model_copy(
                update={"hourly_profile": profile, "historical_data": list(records)}
            )
            self._write(updated)
        return updated

    def write_catalog(self, entries: list[dict[str, Any]]) -> Path:
        try:
            return self.store.write(CATALOG_PATH, entries, source="catalog-import")
        except OSError as exc:
            msg = f"could not write catalog: {exc}"
            raise PersistenceFailure(msg) from exc

    def read_catalog(self) -> list[dict[str, Any]]:
        """Catalog index entries; empty when nothing has been imported."""
        try:
            return self.store.read(CATALOG_PATH) or []
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"could not read catalog: {exc}"
            raise PersistenceFailure(msg) from exc

    def _write(self, location: Location) -> Path:
        try:
            return self.store.write(
                self.path_for(location.id),
                location.model_dump(mode="json"),
                source="location-store",
                location_id=location.id,
            )
        except OSError as exc:
            msg = f"could not write location {location.id}: {exc}"
            raise PersistenceFailure(msg) from exc


class SessionStore:
    """Append-only tick logs, one file per session.

    Appends to the same session are serialized, so ticks land in the order
    they were produced. ``max_events`` bounds how many events a log keeps;
    the oldest are dropped first.
    """

    def __init__(self, store: DataStore, max_events: int | None = None) -> None:
        self.store = store
        self.max_events = max_events
        self._locks = _KeyedLocks()

    def path_for(self, session_id: str) -> Path:
        return SESSIONS_DIR / f"{_checked_id(session_id, 'session')}.json"

    def get(self, session_id: str) -> Session | None:
        try:
            payload = self.store.read(self.path_for(session_id))
            if payload is None:
                return None
            return Session.model_validate(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            msg = f"could not read session {session_id}: {exc}"
            raise PersistenceFailure(msg) from exc

    def append(self, session_id: str, location_id: str, tick: AggregatedTick) -> int:
        """Append one tick, creating the session on first use.

        Returns:
            Number of events now stored for the session.
        """
        with self._locks[session_id]:
            session = self.get(session_id) or Session(
                session_id=session_id, location_id=location_id
            )
            session.events.append(tick.to_payload())
            if self.max_events is not None and len(session.events) > self.max_events:
                del session.events[: len(session.events) - self.max_events]

            try:
                self.store.write(
                    self.path_for(session_id),
                    session.model_dump(mode="json"),
                    source="aggregation-loop",
                    location_id=location_id,
                )
            except OSError as exc:
                msg = f"could not append to session {session_id}: {exc}"
                raise PersistenceFailure(msg) from exc
        return len(session.events)
