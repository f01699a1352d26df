"""Provider protocol and shared request/decode helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import requests

from weather_aggregator.errors import MalformedResponse, ProviderUnavailable
from weather_aggregator.services.http import session

if TYPE_CHECKING:
    from collections.abc import Mapping

    from weather_aggregator.schemas import Location, Observation


class Provider(Protocol):
    """A live weather source that yields one normalized observation."""

    name: str

    def fetch(self, location: Location) -> Observation:
        """Return current conditions or raise a ``ProviderError``."""
        ...


def get_json(
    url: str,
    params: Mapping[str, Any],
    *,
    source: str,
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    GET ``url`` and decode the JSON object it returns.

    Args:
        url: Endpoint URL.
        params: Query parameters.
        source: Provider identifier used in error messages.
        timeout: Per-request timeout; None uses the session default.

    Raises:
        ProviderUnavailable: Connection error, timeout, or non-2xx status.
        MalformedResponse: Body is not a JSON object.
    """
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise ProviderUnavailable(source, str(exc)) from exc

    try:
        data = resp.json()
    except ValueError as exc:
        raise MalformedResponse(source, "response is not valid JSON") from exc

    if not isinstance(data, dict):
        raise MalformedResponse(source, f"expected a JSON object, got {type(data).__name__}")
    return data


def section(data: Mapping[str, Any], key: str, *, source: str) -> Mapping[str, Any]:
    """Return the nested object ``data[key]`` or raise ``MalformedResponse``."""
    value = data.get(key)
    if not isinstance(value, dict):
        raise MalformedResponse(source, f"missing '{key}' object")
    return value


def required_float(data: Mapping[str, Any], key: str, *, source: str) -> float:
    """Read a numeric field that must be present."""
    value = optional_float(data, key, source=source)
    if value is None:
        raise MalformedResponse(source, f"missing '{key}'")
    return value


def optional_float(data: Mapping[str, Any], key: str, *, source: str) -> float | None:
    """Read a numeric field that may be absent or null."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedResponse(source, f"'{key}' is not a number: {value!r}")
    return float(value)
