"""Data model definitions: value types passed between resolver, solar model, solvers and callers."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TieBreak(str, Enum):
    """Which instant to pick when a wall-clock reading occurs more than once."""

    earlier = "earlier"
    later = "later"


class ErrorKind(str, Enum):
    """Classification of a failed deadline resolution."""

    INVALID_FORMAT = "invalid_format"
    INVALID_ZONE = "invalid_zone"
    NONEXISTENT_WALL_TIME = "nonexistent_wall_time"


@dataclass(frozen=True)
class DeadlineInput:
    """Raw deadline as typed by the user. Not yet validated."""

    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"
    zone: str  # IANA zone id or an AoE alias
    tie_break: TieBreak = TieBreak.earlier


@dataclass(frozen=True)
class DeadlineParseResult:
    """Outcome of resolving a DeadlineInput to an absolute instant.

    On success ``deadline_utc_ms`` and ``target_minutes_of_day`` are set; on
    failure ``error_kind`` and ``error`` describe why.
    """

    valid: bool
    ambiguous: bool = False
    deadline_utc_ms: int | None = None
    target_minutes_of_day: int | None = None
    selected_offset_minutes: int | None = None
    candidate_offsets_minutes: tuple[int, ...] = ()
    error_kind: ErrorKind | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.valid and (
            self.deadline_utc_ms is None or self.target_minutes_of_day is None
        ):
            raise ValueError("valid result requires deadline_utc_ms and target_minutes_of_day")
        if self.ambiguous and len(self.candidate_offsets_minutes) < 2:
            raise ValueError("ambiguous result requires at least two candidate offsets")
        if not self.valid and self.error_kind is None:
            raise ValueError("invalid result requires an error_kind")

    @property
    def is_nonexistent_wall_time(self) -> bool:
        return self.error_kind is ErrorKind.NONEXISTENT_WALL_TIME


@dataclass(frozen=True)
class TimezoneOption:
    """One entry of the deadline zone picker."""

    value: str  # Zone id passed to the resolver
    label: str  # Human-readable label
    search_terms: tuple[str, ...]  # Lower-cased strings matched by search


@dataclass(frozen=True)
class LonLatPoint:
    """A vertex of the terminator polyline or night polygon."""

    lon: float  # [-180, 180]
    lat: float  # [-90, 90]


@dataclass(frozen=True)
class Landmark:
    """A fixed geographic point whose meridian crossing is tracked."""

    id: str
    name: str
    lat: float
    lon: float
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class LandmarkCrossing:
    """An instant at which the deadline meridian passes a landmark's longitude."""

    id: str  # "{landmark.id}-{rounded crossing second}"
    landmark: Landmark
    crossing_ms: int


@dataclass(frozen=True)
class CivilBand:
    """A nominal whole-hour UTC offset slice whose civil clock is near the target."""

    offset_hours: int  # -12..14
    center_longitude: float
    start_longitude: float
    end_longitude: float
    minute_difference: float  # Circular distance from the target minute-of-day
    intensity: float  # [0, 1]


@dataclass(frozen=True)
class TimezonePolygonFeature:
    """A normalized timezone polygon. Geometry is kept as its GeoJSON mapping."""

    zone_id: str
    geometry: dict[str, Any]
    id: str | int | None = None


@dataclass(frozen=True)
class ZoneIntensity:
    """A timezone polygon paired with its civil-time glow intensity."""

    feature: TimezonePolygonFeature
    intensity: float


@dataclass(frozen=True)
class LocationPoint:
    """The observer's own position, used to measure distance to the meridian."""

    lat: float
    lon: float
    label: str
    zone: str | None = None  # Civil zone at the point; None over open ocean


@dataclass(frozen=True)
class MeridianDistance:
    """Signed separation between a point and the deadline meridian."""

    delta_longitude: float  # Degrees, positive when the point is east of the line
    delta_minutes: float  # delta_longitude expressed in solar minutes (4 min/deg)
    distance_km: float  # Along the point's parallel


@dataclass(frozen=True)
class DeadlineStatus:
    """Fully computed state of a deadline at one instant. The sole input to presenters."""

    result: DeadlineParseResult
    now_ms: int
    remaining_ms: int  # Negative once the deadline has passed
    cycles_remaining: float  # Full meridian rotations left before the deadline
    apparent_solar: bool
    meridian_longitude: float  # Deadline meridian at now_ms
    deadline_meridian_longitude: float  # Deadline meridian at the deadline instant
    line_speed_deg_per_hour: float
    subsolar_point: LonLatPoint
    crossings: tuple[LandmarkCrossing, ...]
    location: LocationPoint | None = None
    distance: MeridianDistance | None = None
