"""Trailing time windows shared by the analytics services."""

from __future__ import annotations

from datetime import datetime, timedelta

from ims.domain.exceptions import ValidationError
from ims.domain.model.clock import Clock

DEFAULT_WINDOW_DAYS = 30
MAX_WINDOW_DAYS = timedelta.max.days


def validate_window_days(days: object) -> int:
    if isinstance(days, bool) or not isinstance(days, int):
        raise ValidationError(f"Window must be a whole number of days, got {days!r}")
    if days <= 0:
        raise ValidationError(f"Window must be greater than zero days, got {days}")
    if days > MAX_WINDOW_DAYS:
        raise ValidationError(f"Window must be at most {MAX_WINDOW_DAYS} days, got {days}")
    return days


def trailing_window(clock: Clock, days: int) -> tuple[datetime, datetime]:
    """Return ``(now - days, now)`` after validating ``days``."""
    days = validate_window_days(days)
    now = clock.now_utc()
    try:
        start = now - timedelta(days=days)
    except OverflowError as exc:
        raise ValidationError(
            f"A {days}-day window reaches back before the year 1"
        ) from exc
    return start, now
