"""Epoch-millisecond conversions and countdown formatting."""

import math
from datetime import datetime, timedelta

from pytz import utc

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

_EPOCH = datetime(1970, 1, 1, tzinfo=utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (towards +inf)."""
    return math.floor(value + 0.5)


def to_utc_ms(dt: datetime) -> int:
    """Convert a timezone-aware datetime to whole UTC milliseconds since the epoch."""
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def from_utc_ms(ms: float) -> datetime:
    """Convert UTC milliseconds since the epoch to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=ms)


def parse_instant(value: str) -> int:
    """Parse an ISO-8601 instant ("2026-01-01T02:00:00Z") to UTC milliseconds.

    A trailing ``Z`` is accepted; a naive timestamp is taken as UTC.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = utc.localize(dt)
    return to_utc_ms(dt)


def format_duration(ms: float) -> str:
    """Format a countdown as ``HH:MM:SS``. Negative values clamp to zero; hours are unbounded."""
    total_seconds = max(0, math.floor(ms / 1000))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_signed_minutes(minutes: float) -> str:
    """Format a signed minute offset as ``+5m`` or ``-1h 05m``."""
    sign = "+" if minutes >= 0 else "-"
    abs_minutes = abs(round_half_up(minutes))
    hours = abs_minutes // 60
    remainder = abs_minutes % 60
    if hours == 0:
        return f"{sign}{remainder}m"
    return f"{sign}{hours}h {remainder:02d}m"


def format_target_clock(total_minutes: float) -> str:
    """Format a minute-of-day as ``HH:MM``, wrapping around midnight."""
    normalized = round_half_up(total_minutes) % 1440
    return f"{normalized // 60:02d}:{normalized % 60:02d}"
