"""Closed-form solar position model.

Low-order Fourier approximations (NOAA "General Solar Position Calculations")
for the equation of time and declination, plus the geometry derived from them:
sub-solar point, the meridian whose local solar time equals a target
minute-of-day, and the day/night terminator.

Instants are UTC milliseconds since the Unix epoch. Nothing here is iterative
and nothing here logs; every function is a pure function of its arguments.
"""

import math
from datetime import datetime

from pytz import utc

from deadlinesun.clock import MS_PER_DAY, MS_PER_HOUR, MS_PER_MINUTE, from_utc_ms, to_utc_ms
from deadlinesun.geo import (
    EARTH_RADIUS_KM,
    clamp,
    degrees_to_radians,
    radians_to_degrees,
    wrap180,
)
from deadlinesun.models import LonLatPoint, MeridianDistance

TERMINATOR_STEP_DEGREES = 2.0
TERMINATOR_LATITUDE_LIMIT = 89.999


def fractional_year_radians(ms: float) -> float:
    """Phase of the year, in radians, used as the argument of the Fourier series."""
    year = from_utc_ms(ms).year
    start = to_utc_ms(datetime(year, 1, 1, tzinfo=utc)) - MS_PER_DAY
    day_of_year = math.floor((ms - start) / MS_PER_DAY)
    utc_hour = (ms % MS_PER_DAY) / MS_PER_HOUR
    return (2 * math.pi / 365) * (day_of_year - 1 + (utc_hour - 12) / 24)


def equation_of_time_minutes(ms: float) -> float:
    """Apparent minus mean solar time, in minutes."""
    g = fractional_year_radians(ms)
    return 229.18 * (
        0.000075
        + 0.001868 * math.cos(g)
        - 0.032077 * math.sin(g)
        - 0.014615 * math.cos(2 * g)
        - 0.040849 * math.sin(2 * g)
    )


def solar_declination_radians(ms: float) -> float:
    g = fractional_year_radians(ms)
    return (
        0.006918
        - 0.399912 * math.cos(g)
        + 0.070257 * math.sin(g)
        - 0.006758 * math.cos(2 * g)
        + 0.000907 * math.sin(2 * g)
        - 0.002697 * math.cos(3 * g)
        + 0.00148 * math.sin(3 * g)
    )


def utc_minutes_of_day(ms: float) -> float:
    return (ms % MS_PER_DAY) / MS_PER_MINUTE


def _equation_offset(ms: float, apparent: bool) -> float:
    return equation_of_time_minutes(ms) if apparent else 0.0


def subsolar_longitude(ms: float, apparent: bool = False) -> float:
    utc_hour = utc_minutes_of_day(ms) / 60
    e = _equation_offset(ms, apparent) / 60
    return wrap180(15 * (12 - utc_hour - e))


def subsolar_latitude(ms: float) -> float:
    return radians_to_degrees(solar_declination_radians(ms))


def subsolar_point(ms: float, apparent: bool = False) -> LonLatPoint:
    return LonLatPoint(lon=subsolar_longitude(ms, apparent), lat=subsolar_latitude(ms))


def meridian_longitude_for_target(
    ms: float, target_minutes_of_day: float, apparent: bool = False
) -> float:
    """Longitude whose local solar time is ``target_minutes_of_day`` at ``ms``.

    This is the deadline meridian. It sweeps westward at about 15 degrees per hour.
    """
    utc_min = utc_minutes_of_day(ms)
    e = _equation_offset(ms, apparent)
    return wrap180(15 * ((target_minutes_of_day - utc_min - e) / 60))


def phase_degrees(ms: float, target_minutes_of_day: float, apparent: bool = False) -> float:
    """Unwrapped deadline-meridian longitude.

    Equal to :func:`meridian_longitude_for_target` modulo 360, but continuous
    across days so that whole rotations between two instants can be counted by
    subtraction. Decreases with time.
    """
    utc_total_minutes = ms / MS_PER_MINUTE
    e = _equation_offset(ms, apparent)
    return 15 * ((target_minutes_of_day - utc_total_minutes - e) / 60)


def line_speed_degrees_per_hour(
    ms: float, target_minutes_of_day: float, apparent: bool = False
) -> float:
    """Angular speed of the deadline meridian, by a one-hour forward difference."""
    a = phase_degrees(ms, target_minutes_of_day, apparent)
    b = phase_degrees(ms + MS_PER_HOUR, target_minutes_of_day, apparent)
    return abs(b - a)


def terminator_latitude_at_longitude(ms: float, longitude: float, apparent: bool = False) -> float:
    """Latitude at which the sun sits on the horizon along ``longitude``.

    Clamped to +/-89.999 so the poles never degenerate. With the sun over the
    equator the terminator is taken to be the equator itself.
    """
    tan_declination = math.tan(solar_declination_radians(ms))
    if abs(tan_declination) < 1e-9:
        return 0.0

    hour_angle = degrees_to_radians(wrap180(longitude - subsolar_longitude(ms, apparent)))
    latitude = math.atan(-math.cos(hour_angle) / tan_declination)
    return clamp(
        radians_to_degrees(latitude), -TERMINATOR_LATITUDE_LIMIT, TERMINATOR_LATITUDE_LIMIT
    )


def terminator_polyline(
    ms: float, apparent: bool = False, step_degrees: float = TERMINATOR_STEP_DEGREES
) -> tuple[LonLatPoint, ...]:
    """Sample the terminator west to east, always including both +/-180 endpoints."""
    if step_degrees <= 0:
        raise ValueError("step_degrees must be positive")

    points: list[LonLatPoint] = []
    i = 0
    lon = -180.0
    while lon <= 180.0:
        points.append(LonLatPoint(lon=lon, lat=terminator_latitude_at_longitude(ms, lon, apparent)))
        i += 1
        lon = -180.0 + i * step_degrees

    if points[-1].lon != 180.0:
        points.append(LonLatPoint(lon=180.0, lat=terminator_latitude_at_longitude(ms, 180.0, apparent)))
    return tuple(points)


def is_night(ms: float, lat: float, lon: float, apparent: bool = False) -> bool:
    """True when the sun is below the geometric horizon at (lat, lon)."""
    declination = solar_declination_radians(ms)
    latitude = degrees_to_radians(lat)
    hour_angle = degrees_to_radians(wrap180(lon - subsolar_longitude(ms, apparent)))
    sin_altitude = math.sin(latitude) * math.sin(declination) + math.cos(latitude) * math.cos(
        declination
    ) * math.cos(hour_angle)
    return sin_altitude < 0


def night_polygon(ms: float, apparent: bool = False) -> tuple[LonLatPoint, ...]:
    """Ring covering the night side: the terminator closed against the dark pole."""
    terminator = terminator_polyline(ms, apparent)
    if is_night(ms, 89.9, 0.0, apparent):
        return (LonLatPoint(-180.0, 90.0), LonLatPoint(180.0, 90.0), *reversed(terminator))
    return (LonLatPoint(-180.0, -90.0), LonLatPoint(180.0, -90.0), *terminator)


def distance_to_meridian(lat: float, lon: float, line_longitude: float) -> MeridianDistance:
    """Signed separation of (lat, lon) from a meridian, in degrees, solar minutes and km."""
    delta_longitude = wrap180(lon - line_longitude)
    distance_km = abs(
        math.cos(degrees_to_radians(lat)) * degrees_to_radians(delta_longitude) * EARTH_RADIUS_KM
    )
    return MeridianDistance(
        delta_longitude=delta_longitude,
        delta_minutes=delta_longitude * 4,
        distance_km=distance_km,
    )


def sun_direction_ecef(ms: float, apparent: bool = False) -> tuple[float, float, float]:
    """Unit vector towards the sub-solar point (y axis through the north pole)."""
    lat = degrees_to_radians(subsolar_latitude(ms))
    lon = degrees_to_radians(subsolar_longitude(ms, apparent))
    return (
        math.cos(lat) * math.cos(lon),
        math.sin(lat),
        math.cos(lat) * math.sin(lon),
    )
