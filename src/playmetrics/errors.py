"""Analytics collector errors."""

from __future__ import annotations


class AnalyticsError(RuntimeError):
    """Base error for the analytics collector."""


class ChannelUnavailableError(AnalyticsError):
    """A delivery channel lost its host capability between detection and use."""


class QueuePersistenceError(AnalyticsError):
    """Writing the durable fallback queue failed; the report cannot be kept."""
