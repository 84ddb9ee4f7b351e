"""Civil-time glow: which UTC offsets, or which timezone polygons, currently read
close to the target civil minute-of-day.

Two resolutions are offered. :func:`build_civil_bands` uses the nominal 15-degree
hourly slices; :func:`zone_intensity` and :func:`polygon_intensities` use the
real wall clock of each zone from the same zone database the resolver uses.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import pytz

from deadlinesun.clock import from_utc_ms
from deadlinesun.geo import circular_minute_difference, wrap180
from deadlinesun.models import CivilBand, TimezonePolygonFeature, ZoneIntensity
from deadlinesun.solar import utc_minutes_of_day

LOGGER = logging.getLogger(__name__)

MIN_OFFSET_HOURS = -12
MAX_OFFSET_HOURS = 14
BAND_HALF_WIDTH_DEGREES = 7.5

# Property keys that may hold the zone id, most specific first.
ZONE_KEYS = ("tzid", "TZID", "timezone", "zone", "name", "tz_name")

_POLYGON_TYPES = frozenset({"Polygon", "MultiPolygon"})


def _window(glow_window_minutes: float) -> float:
    return max(1.0, glow_window_minutes)


def build_civil_bands(
    ms: float, target_minutes_of_day: float, glow_window_minutes: float
) -> tuple[CivilBand, ...]:
    """Nominal hourly offsets whose civil clock is within the glow window of the target.

    Args:
        ms: Instant, UTC ms.
        target_minutes_of_day: Civil minute-of-day being tracked.
        glow_window_minutes: Half-width of the glow; floored at one minute.

    Returns:
        Bands ordered by offset from -12 to +14. Intensity falls linearly from
        1 at the target to 0 at the window edge.
    """
    utc_minutes = utc_minutes_of_day(ms)
    window = _window(glow_window_minutes)
    bands: list[CivilBand] = []

    for offset in range(MIN_OFFSET_HOURS, MAX_OFFSET_HOURS + 1):
        local_minutes = utc_minutes + offset * 60
        minute_difference = circular_minute_difference(local_minutes, target_minutes_of_day)
        if minute_difference > window:
            continue

        center = wrap180(offset * 15)
        bands.append(
            CivilBand(
                offset_hours=offset,
                center_longitude=center,
                start_longitude=wrap180(center - BAND_HALF_WIDTH_DEGREES),
                end_longitude=wrap180(center + BAND_HALF_WIDTH_DEGREES),
                minute_difference=minute_difference,
                intensity=1 - minute_difference / window,
            )
        )

    return tuple(bands)


def civil_minute_difference_for_zone(
    zone_id: str, ms: float, target_minutes_of_day: float
) -> float | None:
    """Circular distance between the zone's wall clock at ``ms`` and the target.

    Returns None when the zone id is not in the zone database.
    """
    try:
        tz = pytz.timezone(zone_id)
    except pytz.UnknownTimeZoneError:
        return None

    local = from_utc_ms(ms).astimezone(tz)
    local_minutes = local.hour * 60 + local.minute + local.second / 60
    return circular_minute_difference(local_minutes, target_minutes_of_day)


def zone_intensity(
    zone_id: str, ms: float, target_minutes_of_day: float, glow_window_minutes: float
) -> float | None:
    """Glow intensity of one zone, or None if unresolvable or outside the window."""
    difference = civil_minute_difference_for_zone(zone_id, ms, target_minutes_of_day)
    if difference is None:
        return None

    window = _window(glow_window_minutes)
    if difference > window:
        return None
    return 1 - difference / window


def extract_zone_id(properties: Mapping[str, Any] | None) -> str | None:
    """First value under ZONE_KEYS that looks like a zone id (contains "/")."""
    if not properties:
        return None

    for key in ZONE_KEYS:
        value = properties.get(key)
        if isinstance(value, str) and "/" in value:
            return value
    return None


def normalize_timezone_features(
    collection: Mapping[str, Any],
) -> tuple[TimezonePolygonFeature, ...]:
    """Keep Polygon/MultiPolygon features that carry a zone id. Everything else is dropped."""
    normalized: list[TimezonePolygonFeature] = []
    features = collection.get("features")
    if not isinstance(features, (list, tuple)):
        features = ()

    for feature in features:
        if not isinstance(feature, Mapping):
            continue
        geometry = feature.get("geometry")
        if not isinstance(geometry, Mapping) or geometry.get("type") not in _POLYGON_TYPES:
            continue
        properties = feature.get("properties")
        zone_id = extract_zone_id(properties if isinstance(properties, Mapping) else None)
        if zone_id is None:
            continue
        normalized.append(
            TimezonePolygonFeature(zone_id=zone_id, geometry=dict(geometry), id=feature.get("id"))
        )

    dropped = len(features) - len(normalized)
    if dropped:
        LOGGER.debug(
            json.dumps(
                {"event": "timezone_features_dropped", "kept": len(normalized), "dropped": dropped}
            )
        )
    return tuple(normalized)


def polygon_intensities(
    features: Iterable[TimezonePolygonFeature],
    ms: float,
    target_minutes_of_day: float,
    glow_window_minutes: float,
) -> tuple[ZoneIntensity, ...]:
    """The polygons glowing at ``ms``, with their intensities, in input order."""
    glowing: list[ZoneIntensity] = []
    for feature in features:
        intensity = zone_intensity(feature.zone_id, ms, target_minutes_of_day, glow_window_minutes)
        if intensity is not None:
            glowing.append(ZoneIntensity(feature=feature, intensity=intensity))
    return tuple(glowing)
