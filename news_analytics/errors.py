from __future__ import annotations


class NewsAnalyticsError(Exception):
    """Base class for errors raised by the analytics package."""


class NotFoundError(NewsAnalyticsError, LookupError):
    """Raised when a record or cache key cannot be found."""


class InvalidInputError(NewsAnalyticsError, ValueError):
    """Raised when a caller supplies missing or out-of-range parameters."""


class PersistenceError(NewsAnalyticsError, OSError):
    """Raised when the cache snapshot cannot be read or written."""


class UpstreamError(NewsAnalyticsError):
    """Raised when no configured feed could be fetched."""


def require_threshold(threshold: float) -> float:
    if threshold is None or not 0.0 <= float(threshold) <= 1.0:
        raise InvalidInputError(f"threshold must be between 0 and 1, got {threshold!r}")
    return float(threshold)
