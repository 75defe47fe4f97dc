"""Timestamp helpers shared by scoring and visualization."""

import math
from datetime import UTC, datetime, timedelta

SECONDS_PER_DAY = 24 * 3600


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_between(first: datetime, second: datetime) -> float:
    """Absolute distance between two timestamps in fractional days."""
    delta = ensure_utc(first) - ensure_utc(second)
    return abs(delta.total_seconds()) / SECONDS_PER_DAY


def days_since(value: datetime, now: datetime | None = None) -> float:
    """Signed age of a timestamp in fractional days (negative if in the future)."""
    now = ensure_utc(now or utc_now())
    return (now - ensure_utc(value)).total_seconds() / SECONDS_PER_DAY


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def is_recently_created(
    created_at: datetime | None, window_seconds: float = 5.0, now: datetime | None = None
) -> bool:
    """
    Heuristic "is new" check: created within the last ``window_seconds``.

    A missing timestamp counts as new. This is a time-based approximation and
    can misclassify records when the caller is slow or clocks drift; an
    explicit flag set at creation time is the reliable alternative.
    """
    if created_at is None:
        return True
    now = ensure_utc(now or utc_now())
    return now - ensure_utc(created_at) < timedelta(seconds=window_seconds)
