"""Epoch-millisecond helpers.

The API and the database store instants as integer UTC epoch milliseconds.
Domain code works with aware ``datetime`` objects.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union


MS_PER_DAY = 86_400_000

Instant = Union[int, float, datetime]


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def to_datetime(value: Optional[Instant]) -> Optional[datetime]:
    """Coerce ms / datetime into an aware UTC datetime.

    Naive datetimes are read as UTC. Anything unusable yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    try:
        return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def to_ms(value: datetime) -> int:
    aware = to_datetime(value)
    if aware is None:
        raise ValueError('datetime required')
    return int(aware.timestamp() * 1000)


def whole_days_between(earlier: datetime, later: datetime) -> int:
    """Full days elapsed from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days


def format_ms(value: Optional[Instant], fmt: str = '%b %d, %Y') -> str:
    """Template helper: '' for missing values."""
    moment = to_datetime(value)
    return moment.strftime(fmt) if moment else ''
