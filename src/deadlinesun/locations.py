"""Observer locations: a lat/lng pair tagged with the civil zone it lies in."""

import pytz
from timezonefinder import TimezoneFinder

from deadlinesun.clock import from_utc_ms
from deadlinesun.models import LocationPoint


def locate(
    lat: float,
    lon: float,
    label: str | None = None,
    finder: TimezoneFinder | None = None,
) -> LocationPoint:
    """Build a LocationPoint, looking up its timezone.

    Args:
        lat: Latitude (decimal degrees).
        lon: Longitude (decimal degrees).
        label: Display label. Defaults to the formatted coordinates.
        finder: TimezoneFinder to reuse across calls. A fresh one is built if None.

    Returns:
        LocationPoint. ``zone`` is None where no zone polygon covers the point.

    Raises:
        ValueError: If the coordinates are out of range.
    """
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"longitude out of range: {lon}")

    tf = finder if finder is not None else TimezoneFinder()
    zone = tf.timezone_at(lat=lat, lng=lon)
    return LocationPoint(
        lat=lat,
        lon=lon,
        label=label if label is not None else f"{lat:.2f}, {lon:.2f}",
        zone=zone,
    )


def local_clock(location: LocationPoint, ms: float) -> str | None:
    """Wall clock ("YYYY-MM-DD HH:MM TZ") at the location, or None without a known zone."""
    if location.zone is None:
        return None
    try:
        tz = pytz.timezone(location.zone)
    except pytz.UnknownTimeZoneError:
        return None
    return from_utc_ms(ms).astimezone(tz).strftime("%Y-%m-%d %H:%M %Z")
