"""Error taxonomy.

Provider errors are absorbed inside a tick. Everything else ends the
aggregation loop that raised it.
"""

from __future__ import annotations


class AggregatorError(RuntimeError):
    """Base error for the aggregation engine."""


class ProviderError(AggregatorError):
    """A single provider could not produce an observation."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class ProviderUnavailable(ProviderError):
    """Network failure, timeout, or non-success HTTP status."""


class MalformedResponse(ProviderError):
    """The provider answered but the payload could not be decoded."""


class InsufficientHistory(AggregatorError):
    """No archived year could be collected for a baseline."""


class PersistenceFailure(AggregatorError):
    """A store read, update, or append failed."""


class DeliveryFailure(AggregatorError):
    """The subscriber channel rejected a message."""


__all__ = [
    "AggregatorError",
    "DeliveryFailure",
    "InsufficientHistory",
    "MalformedResponse",
    "PersistenceFailure",
    "ProviderError",
    "ProviderUnavailable",
]
